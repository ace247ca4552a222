"""
Command table and reply copy for TeleScope Bot.

Each command is a `CommandEntry` binding an exact trigger (e.g. '/help') to a
responder: a pure function that takes the incoming `telegram.Update` and
returns the `FormattedMessage` to send back. The table is built once, at
import time, and never changes afterwards.

All reply texts describe the advertising service for illustration only; the
bot itself performs no payment, moderation or campaign processing.
"""
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from telegram import Update

from telescope_bot.formatting import FormattedMessage, bold, link, render

LANDING_PAGE_URL = 'https://telescope-landing-page.vercel.app/'

Responder = Callable[[Update], FormattedMessage]


@dataclass(frozen=True)
class CommandEntry:
    """A single registered command."""
    trigger: str          # exact message text, e.g. "/help"
    responder: Responder
    description: str      # shown in Telegram's command menu


class CommandTable:
    """
    Ordered, read-only collection of commands plus a fallback responder.

    Lookups use exact, case-sensitive equality against each trigger in
    registration order, so the first registered entry wins.

    Raises:
        ValueError: If two entries share the same trigger.
    """

    def __init__(self, entries, fallback: Responder):
        entries = tuple(entries)
        seen = set()
        for entry in entries:
            if entry.trigger in seen:
                raise ValueError(f'Duplicate command trigger: {entry.trigger}')
            seen.add(entry.trigger)
        self._entries: Tuple[CommandEntry, ...] = entries
        self._fallback = fallback

    @property
    def entries(self) -> Tuple[CommandEntry, ...]:
        return self._entries

    @property
    def fallback(self) -> Responder:
        return self._fallback

    def lookup(self, text: str) -> Optional[CommandEntry]:
        """Returns the first entry whose trigger equals `text`, or None."""
        for entry in self._entries:
            if entry.trigger == text:
                return entry
        return None

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _bullet(label: str, text: str) -> tuple:
    return ('•   ', bold(label), f' {text}\n')


# --- Responders ---

def handle_start(_update: Update) -> FormattedMessage:
    """Greets the user with the service overview and where to go next."""
    return render(
        bold('Welcome to myTeleScopeBot – Your Premier Partner in Digital Advertising Contracts.'),
        '\n\nWe specialize in connecting advertisers with highly engaged Telegram communities '
        'through a transparent and secure contractual framework. Our platform leverages advanced AI '
        'for precision targeting and ensures compliance with all regulatory standards.\n\n'
        'To understand the full scope of our services and operational integrity, please explore '
        'the commands below.\n\n'
        'For a comprehensive overview of our services and business model, please visit our official '
        'landing page: /website\n\n'
        'To navigate our features, use the /help command.',
    )


def handle_help(_update: Update) -> FormattedMessage:
    """Lists every informational command with a short explanation."""
    return render(
        bold('myTeleScopeBot: Contract-Oriented Features Overview'),
        '\n\nOur bot serves as the primary interface for managing your advertising agreements and '
        'ensuring campaign success.\n\n',
        bold('Key Commands:'),
        '\n'
        '•   /website - Access our official corporate landing page for detailed business information '
        'and case studies.\n'
        '•   /campaign_overview - Understand our structured campaign types and the contractual terms '
        'associated with each.\n'
        '•   /ad_creation - Learn about our ad content creation process, emphasizing compliance and '
        'contractual adherence.\n'
        '•   /payment_flow - Review our secure payment processing protocols and auditable transaction '
        'records.\n'
        '•   /payout_schedule - Examine the transparent payout mechanisms for our community partners, '
        'based on agreed-upon contracts.\n'
        '•   /compliance - Discover our robust anti-ban and content moderation policies, ensuring legal '
        'and ethical advertising.\n'
        '•   /contact_sales - Connect directly with our sales team for partnership inquiries and '
        'detailed contract discussions.\n\n'
        'Our commitment is to provide a reliable, auditable, and high-performance advertising solution.',
    )


def handle_website(_update: Update) -> FormattedMessage:
    return render(
        bold('Official TeleScope Landing Page:'),
        '\nExplore our business model, market impact, and technological advantages in detail on our '
        'corporate website: ',
        link('TeleScope Official Website', LANDING_PAGE_URL),
    )


def handle_campaign_overview(_update: Update) -> FormattedMessage:
    return render(
        bold('Campaign Contractual Overview:'),
        '\n\nWe offer structured advertising campaigns tailored to specific market segments, each '
        'governed by clear contractual terms to ensure mutual benefit and predictable outcomes.\n\n',
        *_bullet('Crypto Sphere:', 'Targeted campaigns for blockchain, DeFi, and cryptocurrency '
                 'projects. Contracts define reach, duration, and compliance with financial regulations.'),
        *_bullet('Gaming Sphere:', 'High-engagement campaigns for game developers, eSports '
                 'organizations, and gaming communities. Agreements specify audience demographics and '
                 'performance metrics.'),
        *_bullet('Fitness Sphere:', 'Focused advertising for health, wellness, and nutrition brands. '
                 'Contracts ensure content aligns with health standards and ethical promotion.'),
        '\nEach campaign is initiated with a formal agreement outlining deliverables, performance '
        'indicators, and payment schedules.',
    )


def handle_ad_creation(_update: Update) -> FormattedMessage:
    return render(
        bold('Ad Content Creation & Compliance:'),
        '\n\nOur platform facilitates the creation of compelling ad content while strictly adhering '
        'to contractual guidelines and regulatory compliance.\n\n',
        '1.  ', bold('Submission:'), ' Advertisers submit their core message and assets.\n',
        '2.  ', bold('AI-Powered Review:'), " Our proprietary AI analyzes content for brand safety, "
        "relevance, and compliance with Telegram's terms of service and our internal ethical "
        "guidelines.\n",
        '3.  ', bold('Anti-Ban Integration:'), ' Ads are processed through our advanced anti-ban '
        'system to ensure uninterrupted delivery and protect campaign integrity.\n',
        '4.  ', bold('Approval & Contractual Terms:'), ' Upon successful review, the ad is approved, '
        'and its distribution terms are formalized within your campaign contract.\n',
        '\nThis rigorous process safeguards both advertiser reputation and platform integrity.',
    )


def handle_payment_flow(_update: Update) -> FormattedMessage:
    return render(
        bold('Secure Payment & Auditable Transactions:'),
        '\n\nOur payment infrastructure is designed for security, transparency, and ease of '
        'auditing, crucial for financial institutions.\n\n',
        *_bullet('Multi-Currency Support:', 'We accept various cryptocurrencies (e.g., USDT) and '
                 'traditional payment methods.'),
        *_bullet('Automated Processing:', 'Payments are processed automatically upon contract '
                 'initiation, ensuring immediate campaign activation.'),
        *_bullet('Transaction Records:', 'Every transaction is meticulously recorded and accessible '
                 'for audit purposes, providing a clear financial trail.'),
        *_bullet('Fraud Prevention:', 'Advanced security measures are in place to detect and prevent '
                 'fraudulent activities.'),
        '\nOur system ensures that all financial interactions are secure, transparent, and fully '
        'compliant with industry standards.',
    )


def handle_payout_schedule(_update: Update) -> FormattedMessage:
    return render(
        bold('Transparent Payouts for Community Partners:'),
        '\n\nWe ensure timely and transparent remuneration for our community partners (group owners) '
        'based on their contractual agreements for hosting ads.\n\n',
        *_bullet('Weekly Settlements:', 'Earnings are calculated and settled weekly, ensuring '
                 'consistent cash flow for our partners.'),
        *_bullet('Performance-Based:', "Payouts are directly linked to ad delivery and engagement "
                 "metrics, as defined in each group's contract."),
        *_bullet('Auditable Reports:', 'Partners receive detailed reports outlining their earnings, '
                 'allowing for full transparency and reconciliation.'),
        *_bullet('Secure Withdrawals:', 'Funds are securely transferred to designated cryptocurrency '
                 'wallets (e.g., TRC20 addresses).'),
        '\nOur payout system reflects our commitment to fair and reliable partnerships.',
    )


def handle_compliance(_update: Update) -> FormattedMessage:
    return render(
        bold('Regulatory Compliance & Platform Integrity:'),
        '\n\nOur operational framework is built on a foundation of strict compliance and ethical '
        'practices, crucial for long-term sustainability and trust.\n\n',
        *_bullet('AI Anti-Ban System:', 'Our proprietary technology proactively adapts to platform '
                 'changes, ensuring uninterrupted ad delivery without violating terms of service.'),
        *_bullet('Content Moderation:', 'All ad content undergoes rigorous human and AI-driven '
                 'moderation to prevent the dissemination of inappropriate, misleading, or illegal '
                 'material.'),
        *_bullet('Data Privacy:', 'We adhere to stringent data protection protocols, safeguarding '
                 'user and partner information.'),
        *_bullet('Legal Framework:', 'Our contracts and operations are designed to align with '
                 'international advertising and financial regulations.'),
        '\nWe are committed to maintaining a safe, compliant, and high-quality advertising ecosystem.',
    )


def handle_contact_sales(_update: Update) -> FormattedMessage:
    return render(
        bold('Connect with Our Sales & Partnership Team:'),
        '\n\nFor detailed discussions on advertising contracts, partnership opportunities, or any '
        'specific inquiries, please reach out to our dedicated team:\n\n',
        *_bullet('Email:', 'contact@telescope-ads.com'),
        *_bullet('Telegram Support:', '@telescope_support (for general inquiries)'),
        '\nWe look forward to discussing how TeleScope can meet your strategic objectives.',
    )


def handle_unknown(_update: Update) -> FormattedMessage:
    """Fallback for any text that is not a registered command."""
    return render(
        "I apologize, I didn't understand that command.\n"
        'Please use one of the predefined commands to navigate our services.\n'
        'Type /help to see a list of available commands.'
    )


COMMANDS = CommandTable(
    [
        CommandEntry('/start', handle_start, 'Welcome and service overview'),
        CommandEntry('/help', handle_help, 'List all available commands'),
        CommandEntry('/website', handle_website, 'Official landing page'),
        CommandEntry('/campaign_overview', handle_campaign_overview, 'Campaign types and contract terms'),
        CommandEntry('/ad_creation', handle_ad_creation, 'Ad creation and review process'),
        CommandEntry('/payment_flow', handle_payment_flow, 'Payment processing and records'),
        CommandEntry('/payout_schedule', handle_payout_schedule, 'Payouts for community partners'),
        CommandEntry('/compliance', handle_compliance, 'Anti-ban and moderation policies'),
        CommandEntry('/contact_sales', handle_contact_sales, 'Contact the sales team'),
    ],
    fallback=handle_unknown,
)
