"""
pyfaucet HTTP API

Routes:
    GET  /balance/{address}  token balance of an account
    POST /faucet             send faucet tokens to an address
    GET  /events/faucet      recent faucet dispenses and mints
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from web3 import Web3

from pyfaucet._version import __version__
from pyfaucet.activity import DEFAULT_LIMIT
from pyfaucet.core.config import DEFAULT_FAUCET_AMOUNT, FaucetConfig
from pyfaucet.faucet import AsyncTokenFaucet

logger = logging.getLogger(__name__)


class FaucetRequest(BaseModel):
    address: Optional[str] = None


def parse_int_param(value: Optional[str]) -> Optional[int]:
    """Parse a non-negative integer query value; anything else is treated as absent."""
    if value is None:
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def parse_limit(value: Optional[str]) -> int:
    limit = parse_int_param(value)
    if not limit:
        return DEFAULT_LIMIT
    return limit


def _error(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def create_app(faucet: Optional[AsyncTokenFaucet] = None, config: Optional[FaucetConfig] = None) -> FastAPI:
    """
    Build the API application.

    When ``faucet`` is omitted it is created at startup from ``config``.
    With neither given, ``config`` is read from the environment up front so
    settings such as CORS_ORIGINS apply to the middleware.
    """
    if faucet is None and config is None:
        config = FaucetConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.faucet is None:
            app.state.faucet = AsyncTokenFaucet.from_config(app.state.config)
        logger.info("Token contract: %s", app.state.faucet.token.contract_address)
        yield
        logger.info("pyfaucet API stopped")

    app = FastAPI(title="pyfaucet API", version=__version__, lifespan=lifespan)
    app.state.faucet = faucet
    app.state.config = config

    origins = config.cors_origins if config is not None else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def faucet_amount(request: Request) -> str:
        cfg: Optional[FaucetConfig] = request.app.state.config
        return cfg.faucet_amount if cfg is not None else DEFAULT_FAUCET_AMOUNT

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/balance/{address}")
    async def get_balance(address: str, request: Request):
        if not Web3.is_address(address):
            return _error(400, "Invalid address format")
        try:
            info = await request.app.state.faucet.token.balance(address)
        except Exception as e:
            logger.error("Error fetching balance: %s", e)
            return _error(500, "Failed to fetch balance", str(e))
        return info.to_dict()

    @app.post("/faucet")
    async def call_faucet(request: Request, payload: Optional[FaucetRequest] = None):
        address = payload.address if payload is not None else None
        if not address:
            return _error(400, "Address is required")
        if not Web3.is_address(address):
            return _error(400, "Invalid address format")
        try:
            receipt = await request.app.state.faucet.token.faucet(address, faucet_amount(request))
        except Exception as e:
            logger.error("Error calling faucet: %s", e)
            return _error(500, "Failed to call faucet", str(e))
        return receipt.to_dict()

    @app.get("/events/faucet")
    async def list_faucet_events(
        request: Request,
        limit: Optional[str] = Query(None),
        from_block: Optional[str] = Query(None, alias="fromBlock"),
        to_block: Optional[str] = Query(None, alias="toBlock"),
    ):
        try:
            page = await request.app.state.faucet.activity.list_activity(
                limit=parse_limit(limit),
                from_block=parse_int_param(from_block),
                to_block=parse_int_param(to_block),
            )
        except Exception as e:
            logger.error("Error fetching faucet events: %s", e)
            return _error(500, "Failed to fetch faucet events", str(e))
        return page.to_dict()

    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = FaucetConfig.from_env()
    logger.info("Starting pyfaucet API on %s:%d (RPC %s)", config.host, config.port, config.rpc_url)
    uvicorn.run(create_app(config=config), host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":
    main()
