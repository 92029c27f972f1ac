"""
SCUM Feed - Admin Log Grammar
"""

from ...models.events import AdminCommand
from ..grammar import Grammar, rule

CATEGORY = 'admin'

# '76561198000000000:AdminName(12)'
ADMIN = r"'(?P<admin_id>\d+):(?P<admin_name>.+?)\((?P<admin_index>\d+)\)'"


def _split_command(text: str):
    parts = text.strip().lstrip('#').split(None, 1)
    if not parts:
        raise ValueError("empty admin command")
    return parts[0], parts[1] if len(parts) > 1 else ''


def build_command(match, context, custom=False):
    command, arguments = _split_command(match.group('command'))
    return AdminCommand(
        **context.header(),
        admin_id=match.group('admin_id'),
        admin_name=match.group('admin_name').strip(),
        command=command,
        arguments=arguments,
        custom=custom,
    )


def build_custom_command(match, context):
    return build_command(match, context, custom=True)


GRAMMAR = Grammar(CATEGORY, [
    rule('custom_command', ADMIN + r" Custom command: '(?P<command>.*)'$", build_custom_command),
    rule('command', ADMIN + r" Command: '(?P<command>.*)'$", build_command),
])
