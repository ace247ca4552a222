import re
import unittest
from unittest.mock import MagicMock

from telescope_bot.commands import (
    COMMANDS,
    LANDING_PAGE_URL,
    CommandEntry,
    CommandTable,
    handle_help,
    handle_start,
    handle_unknown,
    handle_website,
)
from telescope_bot.formatting import render

EXPECTED_TRIGGERS = [
    '/start',
    '/help',
    '/website',
    '/campaign_overview',
    '/ad_creation',
    '/payment_flow',
    '/payout_schedule',
    '/compliance',
    '/contact_sales',
]


def unescaped(body: str) -> str:
    """Drops escape pairs so only characters Telegram would parse as markup remain."""
    return re.sub(r'\\(.)', '', body, flags=re.DOTALL)


class TestCommandTable(unittest.TestCase):
    """Tests for CommandTable construction and lookup."""

    def test_registered_triggers_in_order(self):
        self.assertEqual([entry.trigger for entry in COMMANDS], EXPECTED_TRIGGERS)
        self.assertEqual(len(COMMANDS), 9)
        self.assertIs(COMMANDS.fallback, handle_unknown)

    def test_duplicate_trigger_rejected(self):
        responder = MagicMock()
        with self.assertRaises(ValueError):
            CommandTable(
                [CommandEntry('/a', responder, 'A'), CommandEntry('/a', responder, 'again')],
                fallback=responder,
            )

    def test_lookup_is_exact_and_case_sensitive(self):
        self.assertEqual(COMMANDS.lookup('/help').responder, handle_help)
        self.assertIsNone(COMMANDS.lookup('/HELP'))
        self.assertIsNone(COMMANDS.lookup('/help '))
        self.assertIsNone(COMMANDS.lookup('/help@TeleScopeBot'))
        self.assertIsNone(COMMANDS.lookup('/hel'))
        self.assertIsNone(COMMANDS.lookup('help'))

    def test_first_registered_entry_wins(self):
        first = CommandEntry('/a', MagicMock(), 'first')
        table = CommandTable([first, CommandEntry('/b', MagicMock(), 'second')], fallback=MagicMock())
        self.assertIs(table.lookup('/a'), first)

    def test_entries_are_read_only(self):
        self.assertIsInstance(COMMANDS.entries, tuple)
        with self.assertRaises(AttributeError):
            COMMANDS.entries[0].trigger = '/other'

    def test_every_entry_has_a_menu_description(self):
        for entry in COMMANDS:
            with self.subTest(trigger=entry.trigger):
                self.assertTrue(entry.description)
                self.assertLessEqual(len(entry.description), 256)


class TestResponders(unittest.TestCase):
    """Tests for the reply copy."""

    def test_help_lists_commands(self):
        body = handle_help(MagicMock()).body
        self.assertIn('/website', body)
        # Underscores are escaped for MarkdownV2; Telegram displays /contact_sales.
        self.assertIn('/contact\\_sales', body)
        self.assertIn('/campaign\\_overview', body)
        self.assertTrue(body.startswith('*myTeleScopeBot: Contract\\-Oriented Features Overview*'))

    def test_start_combines_welcome_and_pointers(self):
        body = handle_start(MagicMock()).body
        self.assertIn('Welcome to myTeleScopeBot', body)
        self.assertIn('/website', body)
        self.assertIn('/help', body)

    def test_website_links_landing_page(self):
        body = handle_website(MagicMock()).body
        self.assertIn(f'[TeleScope Official Website]({LANDING_PAGE_URL})', body)

    def test_unknown_text(self):
        message = handle_unknown(MagicMock())
        self.assertIn("I apologize, I didn't understand that command\\.", message.body)
        self.assertEqual(message, render(
            "I apologize, I didn't understand that command.\n"
            'Please use one of the predefined commands to navigate our services.\n'
            'Type /help to see a list of available commands.'
        ))

    def test_every_reply_is_valid_markdown_v2(self):
        """Outside of escapes only bold markers and the website link remain."""
        for entry in list(COMMANDS) + [CommandEntry('fallback', COMMANDS.fallback, '')]:
            with self.subTest(trigger=entry.trigger):
                message = entry.responder(MagicMock())
                bare = unescaped(message.body)
                if entry.trigger == '/website':
                    bare = bare.replace(f'[TeleScope Official Website]({LANDING_PAGE_URL})', '')
                self.assertFalse(set(bare) & set('_[]()~`>#+-=|{}.!\\'))
                self.assertEqual(bare.count('*') % 2, 0)
                self.assertTrue(message.disable_link_preview)


if __name__ == '__main__':
    unittest.main()
