"""
Protocol fee estimation.

Fee-payable operations pay "amgu" (asset management gas units) on top of
regular gas: the Engine contract prices each unit of gas in the protocol
token, and the fee is that amount converted to the reference asset.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Protocol

import requests

from .contracts import Contracts, load_abi
from .environment import Environment
from .exceptions import EstimationError, FundchainError
from .models import Quantity, Token

logger = logging.getLogger(__name__)


class PriceOracle(Protocol):
    """Source of asset prices"""

    def get_price(self, asset: Token, quote: Token, environment: Environment) -> int:
        """Price of one whole ``asset`` expressed in base units of ``quote``"""
        ...


class FeeEstimator(Protocol):
    """Computes the protocol fee owed by a fee-payable transaction"""

    def reference_asset(self, environment: Environment) -> Token:
        ...

    def estimate_fee(self, gas_estimate: int, contract_address: str, environment: Environment) -> Quantity:
        ...


class ContractPriceOracle:
    """
    Read prices from a price source contract.

    A price source quotes every asset in a single quote asset. The requested
    ``quote`` must be that asset; the native asset stands for the wrapped
    native token of the deployment.

    Args:
        price_source: Price source address; defaults to the deployment's
    """

    def __init__(self, price_source: Optional[str] = None):
        self.price_source = price_source

    def get_price(self, asset: Token, quote: Token, environment: Environment) -> int:
        deployment = environment.deployment
        address = self.price_source
        if address is None and deployment is not None:
            address = deployment.price_source
        if not address:
            raise EstimationError("No price source configured for the environment")
        if asset.address is None:
            raise EstimationError(f"Cannot price native asset {asset.symbol} on-chain")

        abi = load_abi(Contracts.PRICE_SOURCE)
        quote_address = quote.address
        if quote_address is None and deployment is not None:
            quote_address = deployment.native_asset
        if quote_address:
            source_quote = environment.chain.call(address, abi, "getQuoteAsset", [])
            if str(source_quote).lower() != quote_address.lower():
                raise EstimationError(
                    f"Price source {address} quotes in {source_quote}, not {quote.symbol} ({quote_address})"
                )

        price, _timestamp = environment.chain.call(address, abi, "getPrice", [asset.address])
        return int(price)


class HttpPriceOracle:
    """
    Fetch prices from an HTTP price service.

    The service answers ``GET {base_url}/price?base=MLN&quote=ETH`` with
    ``{"price": "0.0052"}``, the price of one whole base asset in whole
    quote units.

    Args:
        base_url: Service URL
        timeout: Timeout for HTTP requests in seconds
        session: Optional requests session to reuse
        logger: Optional logger instance
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def get_price(self, asset: Token, quote: Token, environment: Environment) -> int:
        try:
            response = self.session.get(
                f"{self.base_url}/price",
                params={"base": asset.symbol, "quote": quote.symbol},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(f"Price request failed: {e}")
            raise EstimationError(f"Price oracle unavailable: {str(e)}")

        content_type = response.headers.get('Content-Type', '')
        if 'application/json' not in content_type:
            self.logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")

        try:
            result = response.json()
        except ValueError as e:
            raise EstimationError(f"Invalid JSON response from price oracle: {str(e)}")

        if not isinstance(result, dict) or "price" not in result:
            raise EstimationError(f"Missing price in oracle response: {result}")
        try:
            price = Decimal(str(result["price"]))
        except InvalidOperation:
            raise EstimationError(f"Invalid price in oracle response: {result['price']!r}")
        self.logger.debug(f"Oracle price {asset.symbol}/{quote.symbol}: {price}")
        return int(price * (10 ** quote.decimals))


class AmguFeeEstimator:
    """
    Estimate the amgu fee of a transaction.

    fee = ceil(gas_estimate * amgu_price * price(mln, reference) / 10**mln_decimals)

    The amgu price comes from the Engine contract, the protocol token price
    from the injected oracle. Rounding up keeps the fee from falling short of
    what the contract charges.

    Args:
        oracle: Price oracle for the protocol token
        reference: Asset the fee is denominated in; the environment's native asset when None
        engine: Engine address; defaults to the deployment's
    """

    def __init__(
        self,
        oracle: PriceOracle,
        reference: Optional[Token] = None,
        engine: Optional[str] = None
    ):
        self.oracle = oracle
        self.reference = reference
        self.engine = engine

    def reference_asset(self, environment: Environment) -> Token:
        return self.reference or environment.native_asset

    def estimate_fee(self, gas_estimate: int, contract_address: str, environment: Environment) -> Quantity:
        deployment = environment.deployment
        engine = self.engine or (deployment.engine if deployment else None)
        mln_address = deployment.mln_token if deployment else None
        if not engine or not mln_address:
            raise EstimationError("Fee estimation needs the engine and protocol token addresses of the deployment")

        reference = self.reference_asset(environment)
        try:
            amgu_price = int(environment.chain.call(engine, load_abi(Contracts.ENGINE), "getAmguPrice", []))
            decimals = int(environment.chain.call(mln_address, load_abi(Contracts.PREMINED_TOKEN), "decimals", []))
            mln = Token(symbol="MLN", address=mln_address, decimals=decimals)
            price = self.oracle.get_price(mln, reference, environment)
        except FundchainError:
            raise
        except Exception as e:
            raise EstimationError(f"Fee estimation failed: {str(e)}") from e

        mln_owed = gas_estimate * amgu_price
        fee = -(-(mln_owed * price) // (10 ** decimals))
        environment.logger.debug(
            f"Amgu fee for {contract_address}: {gas_estimate} gas x {amgu_price} amgu price -> {fee} {reference.symbol}"
        )
        return Quantity(token=reference, quantity=fee)
