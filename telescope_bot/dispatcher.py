"""
Routes a single Telegram update to its responder and delivers the reply.

`dispatch` implements the routing rules: an exact command match, the text
fallback, or nothing at all for updates that carry no text. `dispatch_safely`
is the error boundary around it used by the webhook: whatever goes wrong
while building or sending a reply is logged, answered with an apology where
possible, and never raised to the caller.
"""
import logging
from enum import Enum
from typing import Awaitable, Callable

from telegram import Update

from telescope_bot.commands import CommandTable
from telescope_bot.formatting import FormattedMessage, render

logger = logging.getLogger(__name__)

APOLOGY_TEXT = 'An unexpected error occurred. Our team has been notified. Please try again later.'

Sender = Callable[[int, FormattedMessage], Awaitable[None]]


class Outcome(Enum):
    """How the handling of one update ended."""
    MATCHED = 'matched'
    UNMATCHED = 'unmatched'
    IGNORED = 'ignored'
    FAULTED = 'faulted'


def update_type(update: Update) -> str:
    """Returns the name of the payload carried by `update`, e.g. 'message' or 'callback_query'."""
    for kind in Update.ALL_TYPES:
        if getattr(update, kind, None) is not None:
            return str(kind)
    return 'unknown'


async def dispatch(update: Update, table: CommandTable, send: Sender) -> Outcome:
    """
    Selects a responder for `update` and sends its reply.

    A text message whose text equals a registered trigger goes to that
    trigger's responder. Any other text message goes to the table's fallback.
    Updates without message text are acknowledged without a reply.

    Args:
        update: The incoming update.
        table: The command table to match against.
        send: Coroutine function delivering a `FormattedMessage` to a chat id.

    Returns:
        Outcome: MATCHED, UNMATCHED or IGNORED.

    Raises:
        Exception: Anything raised by the responder or by `send` propagates.
    """
    message = update.message
    if message is None or not message.text:
        logger.info(f'Ignoring {update_type(update)} update without text (update_id {update.update_id})')
        return Outcome.IGNORED

    chat_id = message.chat.id
    entry = table.lookup(message.text)
    if entry is not None:
        reply = entry.responder(update)
        outcome = Outcome.MATCHED
        logger.info(f'Command {entry.trigger} from chat_id {chat_id}')
    else:
        reply = table.fallback(update)
        outcome = Outcome.UNMATCHED
        logger.info(f'Unrecognized text from chat_id {chat_id}, sending fallback')

    await send(chat_id, reply)
    return outcome


async def dispatch_safely(update: Update, table: CommandTable, send: Sender) -> Outcome:
    """
    Runs `dispatch` and absorbs any failure.

    On error the failure is logged with the update type and a single apology
    is sent to the update's chat, if it has one. Nothing is retried and no
    exception leaves this function.
    """
    try:
        return await dispatch(update, table, send)
    except Exception:
        logger.exception(f'Error for {update_type(update)} update (update_id {update.update_id})')

    chat = update.effective_chat
    if chat is not None:
        try:
            await send(chat.id, render(APOLOGY_TEXT))
        except Exception as e:
            logger.error(f'Could not deliver apology to chat_id {chat.id}: {e}')
    return Outcome.FAULTED
