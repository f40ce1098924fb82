import pytest

from portfolio_tracker.config import Settings
from portfolio_tracker.infrastructure.holdings.holdings_store import HoldingsLoadError
from portfolio_tracker.main import create_app
from portfolio_tracker.runtime import PortfolioRuntime


@pytest.mark.asyncio
async def test_start_loads_holdings(tmp_path):
    path = tmp_path / "holdings.csv"
    path.write_text("Symbol,Quantity,Purchase Price,Sector\nAAPL,10,150,Tech\n")
    runtime = PortfolioRuntime.from_settings(Settings(HOLDINGS_FILE=str(path), PRICE_CACHE_TTL_SECONDS=30))

    await runtime.start()
    try:
        assert runtime.holdings_store.symbols() == ["AAPL"]
        assert runtime.price_cache.ttl_seconds == 30
        assert runtime.pipeline.cache is runtime.price_cache
    finally:
        await runtime.stop()


@pytest.mark.asyncio
async def test_start_without_holdings_is_fatal(tmp_path):
    runtime = PortfolioRuntime.from_settings(Settings(HOLDINGS_FILE=str(tmp_path / "missing.csv")))
    with pytest.raises(HoldingsLoadError):
        await runtime.start()
    await runtime.stop()


@pytest.mark.asyncio
async def test_lifespan_refuses_to_serve_without_holdings(tmp_path):
    app = create_app(settings=Settings(HOLDINGS_FILE=str(tmp_path / "missing.csv")))
    with pytest.raises(HoldingsLoadError):
        async with app.router.lifespan_context(app):
            pass
    assert app.state.portfolio_runtime is None


@pytest.mark.asyncio
async def test_lifespan_builds_and_tears_down_runtime(tmp_path):
    path = tmp_path / "holdings.csv"
    path.write_text("Symbol,Quantity,Purchase Price,Sector\nAAPL,10,150,Tech\n")
    app = create_app(settings=Settings(HOLDINGS_FILE=str(path)))

    async with app.router.lifespan_context(app):
        runtime = app.state.portfolio_runtime
        assert isinstance(runtime, PortfolioRuntime)
        assert len(runtime.holdings_store) == 1

    assert app.state.portfolio_runtime is None
