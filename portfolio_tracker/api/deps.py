from fastapi import HTTPException, Request

from portfolio_tracker.runtime import PortfolioRuntime


def get_runtime(request: Request) -> PortfolioRuntime:
    runtime = getattr(request.app.state, "portfolio_runtime", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Portfolio runtime not initialized")
    return runtime
