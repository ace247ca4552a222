"""
MarkdownV2 rendering for outbound replies.

Telegram rejects a MarkdownV2 message outright if any reserved character
(``_ * [ ] ( ) ~ ` > # + - = | { } . !``) appears unescaped outside of
intended markup. Every reply therefore goes through `render`, which escapes
plain text and passes through only text explicitly marked as `Markup`.
"""
from dataclasses import dataclass

from telegram import LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.helpers import escape_markdown


class Markup(str):
    """A string that is already valid MarkdownV2 and must not be escaped again."""


def escape(text: str) -> Markup:
    """Escapes every MarkdownV2 reserved character in `text`."""
    if isinstance(text, Markup):
        return text
    return Markup(escape_markdown(text, version=2))


def bold(text: str) -> Markup:
    return Markup(f'*{escape(text)}*')


def link(label: str, url: str) -> Markup:
    """Builds an inline link. Inside the URL only ')' and '\\' are reserved."""
    escaped_url = escape_markdown(url, version=2, entity_type='text_link')
    return Markup(f'[{escape(label)}]({escaped_url})')


@dataclass(frozen=True)
class FormattedMessage:
    """A reply body ready for delivery, together with its send options."""
    body: str
    parse_mode: str = ParseMode.MARKDOWN_V2
    disable_link_preview: bool = True

    def send_options(self) -> dict:
        """Keyword arguments for `telegram.Bot.send_message`."""
        return {
            'parse_mode': self.parse_mode,
            'link_preview_options': LinkPreviewOptions(is_disabled=self.disable_link_preview),
        }


def render(*parts: str) -> FormattedMessage:
    """
    Renders reply text into a MarkdownV2 `FormattedMessage`.

    Plain `str` parts are escaped; `Markup` parts (from `bold`, `link` or
    `escape`) are kept as they are. Parts are joined without separators.

    Args:
        *parts: Plain text and markup fragments, in display order.

    Returns:
        FormattedMessage: The escaped body with MarkdownV2 parse mode and link
            previews disabled.
    """
    body = ''.join(escape(part) for part in parts)
    return FormattedMessage(body=body)
