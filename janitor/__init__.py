"""Archive unsubscribed users from a Mailchimp list."""

__version__ = "0.1.0"
