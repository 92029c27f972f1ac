"""
SCUM Feed - Economy Log Grammar
Trades, bank movements, currency conversion and the Before/After balance
lines that the economy correlator pairs with trades
"""

import re

from ...models.events import Balance, EconomyTransaction, FinancialStateMarker
from ..grammar import Grammar, parse_number, rule
from .common import player, split_item

CATEGORY = 'economy'

TRADEABLE = r'\[Trade\] Tradeable \((?P<item>.+?)\) '
BANK_PLAYER = r'\[Bank\] (?P<player_name>.+?) ?\(ID:(?P<player_id>\d+)\)\(Account Number:(?P<account>\d+)\) '
BALANCES = (
    r'(?P<cash>\S+) cash, (?P<account>\S+) account balance and (?P<gold>\S+) gold'
    r' and trader (?:had|has) (?P<funds>\S+) funds'
)

QUANTITY_RE = re.compile(r'\bx(\d+)\b')


def _item_fields(match):
    item, extra = split_item(match.group('item'))
    quantity = QUANTITY_RE.search(extra)
    return {'item': item, 'quantity': parse_number(quantity.group(1)) if quantity else None}


def _balance(match) -> Balance:
    return Balance(
        cash=parse_number(match.group('cash')),
        account=parse_number(match.group('account')),
        gold=parse_number(match.group('gold')),
        trader_funds=parse_number(match.group('funds')),
    )


def build_sold(match, context):
    return EconomyTransaction(
        **context.header(),
        action='sold',
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        amount=parse_number(match.group('amount')),
        counterparty=match.group('trader'),
        **_item_fields(match)
    )


def build_purchased(match, context):
    return EconomyTransaction(
        **context.header(),
        action='purchased',
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        amount=parse_number(match.group('amount')),
        currency=match.group('currency') or 'money',
        counterparty=match.group('trader'),
        **_item_fields(match)
    )


def build_bank(action):
    def build(match, context):
        return EconomyTransaction(
            **context.header(),
            action=action,
            player_name=match.group('player_name').strip(),
            player_id=match.group('player_id'),
            amount=parse_number(match.group('amount')),
            counterparty=f"account {match.group('account')}",
        )
    return build


def build_conversion(match, context):
    return EconomyTransaction(
        **context.header(),
        action='conversion',
        player_name=match.group('player_name').strip(),
        player_id=match.group('player_id'),
        amount=parse_number(match.group('amount')),
        currency=match.group('from_currency'),
        received=parse_number(match.group('received')),
        received_currency=match.group('to_currency'),
    )


def build_marker(phase):
    def build(match, context):
        return FinancialStateMarker(
            **context.header(),
            phase=phase,
            player_name=match.group('player_name').strip(),
            player_id=match.group('player_id'),
            balance=_balance(match),
            trader=match.group('trader'),
        )
    return build


GRAMMAR = Grammar(CATEGORY, [
    # TRADES
    rule('trade_sold',
         TRADEABLE + r'sold by ' + player('player') + r' for (?P<amount>[^\s(]+)(?: \([^)]*\))?'
         r' to trader (?P<trader>[^,\s]+)',
         build_sold),
    rule('trade_purchased',
         TRADEABLE + r'purchased by ' + player('player') + r' for (?P<amount>[^\s(]+)'
         r' (?:(?P<currency>money|gold|fame points) )?from trader (?P<trader>[^,\s]+)',
         build_purchased),

    # BALANCE MARKERS
    rule('before_trade',
         r'\[Trade\] Before (?:purchasing|selling) tradeables? (?:from|to) trader (?P<trader>[^,\s]+),'
         r' player ' + player('player') + r' had ' + BALANCES,
         build_marker('Before')),
    rule('after_trade',
         r'\[Trade\] After tradeable (?:purchase|sale) (?:from|to) trader (?P<trader>[^,\s]+),'
         r' player ' + player('player') + r' has ' + BALANCES,
         build_marker('After')),

    # BANK
    rule('bank_deposit', BANK_PLAYER + r'deposited (?P<amount>[^\s(]+)', build_bank('deposit')),
    rule('bank_withdraw', BANK_PLAYER + r'withdrew (?P<amount>[^\s(]+)', build_bank('withdraw')),

    rule('currency_conversion',
         r'\[Currency Conversion\] ' + player('player') + r' exchanged (?P<amount>\S+)'
         r' (?P<from_currency>gold|money|cash) for (?P<received>\S+) (?P<to_currency>gold|money|cash)',
         build_conversion),
])
