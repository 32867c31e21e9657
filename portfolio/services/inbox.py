"""
Inbox Helpers

Search, unread counting and the dashboard summary over contact messages and
the visit log.
"""

from portfolio.services import repository

SEARCH_FIELDS = ('name', 'email', 'subject', 'message')


def filter_messages(messages, query):
    """Case-insensitive substring match across sender name, email, subject and body."""
    query = (query or '').lower()
    if not query:
        return list(messages)
    return [m for m in messages
            if any(query in (m.get(field) or '').lower() for field in SEARCH_FIELDS)]


def count_unread(messages):
    return sum(1 for m in messages if not m.get('read'))


def open_message(message_id):
    """Load a message, marking it read first if it was unread.

    Returns:
        The message dict, or None if it does not exist
    """
    message = repository.messages.get(message_id)
    if message is None:
        return None
    if not message['read']:
        message = repository.mark_message_read(message_id)
    return message


def dashboard_summary(recent_limit=4):
    """Latest messages plus visit counts (null user agent is the unique visitor proxy)."""
    return {
        'recent_messages': repository.recent_messages(recent_limit),
        'total_visits': repository.site_visits.count(),
        'unique_visitors': repository.site_visits.count(user_agent=None),
    }
