"""Market data ingestion package.

Modules placed here talk to the Binance REST API and sanitize raw tickers and
klines into the structures consumed by the classifier and the monitor loop.
"""

__all__: list[str] = []
