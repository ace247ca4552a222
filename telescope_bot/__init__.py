"""TeleScope Bot: Telegram webhook handler for AWS Lambda."""
