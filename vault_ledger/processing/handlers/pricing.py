# vault_ledger/processing/handlers/pricing.py

from decimal import Decimal
from typing import Dict, List, Optional

from ...database.repository_manager import RepositoryManager
from ...database.store import EntityStore
from ...database.tables import DBFXOracle, DBToken
from ...types.configs.config import FXAggregatorConfig
from ...types.constants import (
    PRECIOUS_METAL_TOKEN,
    TROY_OUNCE_IN_GRAMS,
    TROY_OUNCE_MULTIPLIER,
    DEFAULT_FX_ORACLE_DECIMALS,
    FX_PRICE_DECIMALS,
    ZERO_BD,
)
from ...types.model.events import OracleRegistered, OracleAnswerUpdated
from ...types.new import EvmAddress
from ...utils.amounts import amount_to_int, scale_down, truncating_div
from ..context import EventContext
from .base import BaseHandler


def value_in_fx(value: Decimal, token: DBToken) -> Decimal:
    """Value of `value` units of `token` at its latest FX price; zero when unpriced"""
    if token.latest_fx_price is None:
        return ZERO_BD
    return value * token.latest_fx_price


class PricingHandler(BaseHandler):
    """
    FX reference prices from oracle answers.

    An aggregator prices every token that lists it, either through the
    static allow-list or through a registered FXOracle.
    """

    def __init__(self, repos: RepositoryManager,
                 fx_aggregators: Optional[List[FXAggregatorConfig]] = None,
                 precious_metal_token: EvmAddress = PRECIOUS_METAL_TOKEN):
        super().__init__(repos)
        self.precious_metal_token = EvmAddress(precious_metal_token.lower())

        self.aggregators: Dict[str, List[EvmAddress]] = {}
        for entry in fx_aggregators or []:
            tokens = self.aggregators.setdefault(entry.aggregator.lower(), [])
            if entry.token.lower() not in tokens:
                tokens.append(EvmAddress(entry.token.lower()))

        self.register(OracleRegistered, self.handle_oracle_registered)
        self.register(OracleAnswerUpdated, self.handle_answer_updated)

    def handle_oracle_registered(self, event: OracleRegistered, ctx: EventContext) -> bool:
        oracle = self.repos.fx_oracles.get_or_create(ctx.store, event.oracle)
        if event.decimals is not None:
            oracle.decimals = event.decimals
        if event.divisor is not None:
            oracle.divisor = amount_to_int(event.divisor)

        added = self.repos.fx_oracles.add_token(oracle, event.token)
        self.log_debug("Oracle registered",
                       oracle=oracle.id,
                       token=event.token,
                       token_added=added,
                       **event.context())
        return True

    def handle_answer_updated(self, event: OracleAnswerUpdated, ctx: EventContext) -> bool:
        store = ctx.store
        answer = amount_to_int(event.answer)
        oracle = self.repos.fx_oracles.get(store, event.aggregator)
        tokens = self.tokens_for_aggregator(store, event.aggregator, oracle)

        if oracle is None:
            self.log_warning("Oracle not found", oracle=event.aggregator.lower(), **event.context())

        updated = False
        for address in tokens:
            token = self.repos.tokens.get(store, address)
            if token is None:
                self.log_warning("Token not found for oracle answer",
                                 token=address,
                                 oracle=event.aggregator.lower(),
                                 **event.context())
                continue

            if not token.fx_oracle_decimals:
                token.fx_oracle_decimals = DEFAULT_FX_ORACLE_DECIMALS

            token.latest_fx_price = self.normalize_answer(address, answer, oracle)
            updated = True

        return updated

    def tokens_for_aggregator(self, store: EntityStore, aggregator: EvmAddress,
                              oracle: Optional[DBFXOracle] = None) -> List[EvmAddress]:
        """Allow-list tokens first, then registry tokens, without duplicates"""
        tokens = list(self.aggregators.get(aggregator.lower(), []))
        if oracle is None:
            oracle = self.repos.fx_oracles.get(store, aggregator)
        if oracle is not None:
            for token in oracle.tokens:
                if token not in tokens:
                    tokens.append(EvmAddress(token))
        return tokens

    def normalize_answer(self, token: EvmAddress, answer: int, oracle: Optional[DBFXOracle]) -> Decimal:
        if token == self.precious_metal_token:
            # Feed quotes per troy ounce; price per gram
            per_gram = truncating_div(answer * TROY_OUNCE_MULTIPLIER, TROY_OUNCE_IN_GRAMS)
            return scale_down(per_gram, FX_PRICE_DECIMALS)

        if oracle is not None and oracle.divisor is not None and oracle.decimals:
            rescaled = truncating_div(answer * 10 ** oracle.decimals, oracle.divisor)
            return scale_down(rescaled, FX_PRICE_DECIMALS)

        return scale_down(answer, FX_PRICE_DECIMALS)
