"""
TeleScope Bot: A Serverless Telegram Bot for Advertising Contract Information.

This AWS Lambda application, deployed behind API Gateway, answers a fixed set
of Telegram commands (/start, /help, /website, /campaign_overview, ...) with
pre-written MarkdownV2 replies describing the TeleScope advertising service.

Key functionalities include:
- Receiving Telegram updates through a webhook and parsing them into
  `telegram.Update` objects.
- Routing each update to exactly one command responder, or to the fallback
  for unrecognized text.
- Escaping every reply for Telegram's MarkdownV2 dialect.
- Absorbing all processing errors so Telegram always sees HTTP 200 and never
  redelivers an update.
- Registering the webhook URL and command menu with Telegram on deployment.

The main handler for Telegram webhook events is the `webhook` function.
`set_webhook` is invoked once after deployment.
"""
import asyncio
import base64
import binascii
import json
import logging
import os
from typing import Optional

import telegram
from telegram import BotCommand, Update
from telegram.error import TelegramError

from telescope_bot.commands import COMMANDS
from telescope_bot.dispatcher import Outcome, dispatch_safely
from telescope_bot.formatting import FormattedMessage

# Lambda pre-installs a handler on the root logger; replace it with ours.
logger = logging.getLogger()

if logger.handlers:
    for handler in logger.handlers:
        logger.removeHandler(handler)

logging.basicConfig(level=logging.INFO)

OK_RESPONSE = {
    'statusCode': 200,
    'body': ''
}
ERROR_RESPONSE = {
    'statusCode': 400,
    'body': json.dumps('Oops, something went wrong!')
}

SECRET_TOKEN_HEADER = 'X-Telegram-Bot-Api-Secret-Token'


def read_bot_token() -> str:
    """Reads the bot token from the 'BOT_TOKEN' environment variable.

    Called once when the module is imported, so a cold start without a token
    fails before any request is accepted.

    Raises:
        NotImplementedError: If 'BOT_TOKEN' is not set or is empty.
    """
    token = os.environ.get('BOT_TOKEN')

    if not token:
        logger.error('The BOT_TOKEN must be set')
        raise NotImplementedError('BOT_TOKEN environment variable is not set')

    return token


BOT_TOKEN = read_bot_token()


def configure_telegram() -> telegram.Bot:
    """Returns a new `telegram.Bot` for the token read at startup.

    A fresh Bot is built per invocation because each one runs on its own
    `asyncio.run` event loop.
    """
    return telegram.Bot(BOT_TOKEN)


def webhook_secret() -> Optional[str]:
    """Returns the shared webhook secret, or None when none is configured."""
    return os.environ.get('WEBHOOK_SECRET') or None


def get_header(event: dict, name: str) -> Optional[str]:
    """Looks up a request header by case-insensitive name."""
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def get_http_method(event: dict) -> Optional[str]:
    """Returns the request method for REST API (v1) and HTTP API / function URL (v2) events."""
    method = event.get('httpMethod')
    if method is None:
        method = ((event.get('requestContext') or {}).get('http') or {}).get('method')
    return method.upper() if method else None


def parse_body(event: dict) -> Optional[dict]:
    """Decodes the request body into a JSON object.

    Args:
        event (dict): The API Gateway event.

    Returns:
        Optional[dict]: The decoded body, or None if it is missing, not valid
            JSON, or not a JSON object.
    """
    body = event.get('body')
    if not body:
        logger.warning('Webhook POST received without a body')
        return None

    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        data = json.loads(body)
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.error(f'Failed to decode base64 event body: {e}')
        return None
    except json.JSONDecodeError as e:
        logger.error(f'Failed to parse event body as JSON: {e}')
        return None

    if not isinstance(data, dict):
        logger.error(f'Event body is not a JSON object: {type(data).__name__}')
        return None
    return data


def parse_update(data: dict, bot: telegram.Bot) -> Optional[Update]:
    """Builds a `telegram.Update` from decoded JSON, or returns None if it does not fit the schema."""
    try:
        return Update.de_json(data, bot)
    except Exception as e:
        logger.error(f'Error creating Telegram Update object: {e}')
        return None


async def process_update(bot: telegram.Bot, update: Update) -> Outcome:
    """Dispatches `update` and delivers the reply through `bot`.

    Failures while opening or closing the bot session are logged and reported
    as FAULTED; everything else is handled by `dispatch_safely`.
    """
    async def send(chat_id: int, message: FormattedMessage) -> None:
        sent = await bot.send_message(chat_id=chat_id, text=message.body, **message.send_options())
        logger.info(f'Message sent to chat_id {chat_id}. Message ID: {sent.message_id}')

    try:
        async with bot:
            return await dispatch_safely(update, COMMANDS, send)
    except TelegramError as e:
        logger.error(f'Telegram session error for update {update.update_id}: {e}')
        return Outcome.FAULTED


def webhook(event, context):
    """
    Main handler for incoming Telegram webhook events.

    This function is triggered by API Gateway when Telegram sends an update.
    It parses the incoming update, routes it to the matching command responder
    and sends back the reply.

    Args:
        event (dict): The event payload from API Gateway, containing the HTTP
                      request details, including the Telegram update in the body.
        context (object): The AWS Lambda runtime context object.

    Returns:
        dict: Always `OK_RESPONSE`. Non-POST requests (health checks, browser
              visits), malformed bodies and processing failures are all
              acknowledged so Telegram does not retry the delivery.
    """
    method = get_http_method(event)
    if method != 'POST':
        logger.info(f'Webhook received non-POST request: HTTP Method={method}')
        return OK_RESPONSE

    secret = webhook_secret()
    if secret is not None and get_header(event, SECRET_TOKEN_HEADER) != secret:
        logger.warning('Webhook request rejected: secret token mismatch')
        return OK_RESPONSE

    bot = configure_telegram()

    data = parse_body(event)
    if data is None:
        return OK_RESPONSE

    update = parse_update(data, bot)
    if update is None:
        return OK_RESPONSE

    outcome = asyncio.run(process_update(bot, update))
    logger.info(f'Update {update.update_id} handled: {outcome.value}')
    return OK_RESPONSE


async def register_webhook(bot: telegram.Bot, url: str) -> bool:
    """Points Telegram at `url` and publishes the command menu.

    Returns:
        bool: True if Telegram accepted the webhook.
    """
    commands = [BotCommand(entry.trigger.lstrip('/'), entry.description) for entry in COMMANDS]
    async with bot:
        registered = await bot.set_webhook(
            url,
            allowed_updates=[Update.MESSAGE],
            secret_token=webhook_secret(),
        )
        if registered:
            await bot.set_my_commands(commands)
    return registered


def set_webhook(event: dict, context: object) -> dict:
    """Deployment hook that points Telegram at this stack's API Gateway stage.

    Registers `https://{Host}/{stage}/` as the webhook, limited to `message`
    updates and carrying `WEBHOOK_SECRET` when one is configured, then publishes
    the command table as the bot's command menu. The menu is only updated once
    Telegram has accepted the webhook.

    Args:
        event (dict): Invocation event with a `Host` header and `requestContext.stage`.
        context (object): Unused.

    Returns:
        dict: `OK_RESPONSE` when the webhook is registered, otherwise `ERROR_RESPONSE`.
    """
    logger.info('Event for set_webhook: {}'.format(event))
    bot = configure_telegram()
    url = 'https://{}/{}/'.format(
        get_header(event, 'Host'),
        (event.get('requestContext') or {}).get('stage'),
    )

    try:
        registered = asyncio.run(register_webhook(bot, url))
    except TelegramError as e:
        logger.error(f'Failed to register webhook {url}: {e}')
        return ERROR_RESPONSE

    if registered:
        return OK_RESPONSE

    return ERROR_RESPONSE
