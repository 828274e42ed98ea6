from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from dataclasses import asdict
from typing import Dict, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulation import Request, RequestGenerator, Simulation, SimulationConfig

logger = logging.getLogger(__name__)


class AlgorithmSelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class RequestSubmission(BaseModel):
    origin: int
    destination: int
    passenger_id: Optional[int] = Field(default=None, ge=0)


class SimulationManager:
    def __init__(self, config: Optional[SimulationConfig] = None, with_traffic: bool = False) -> None:
        self.config = config or SimulationConfig()
        self.simulation = Simulation.from_config(self.config)
        self.tick_interval = self.config.tick_interval
        # Zero keeps ticking until shutdown.
        self.run_duration = self.config.run_duration
        self.generator: Optional[RequestGenerator] = None
        if with_traffic:
            self.generator = RequestGenerator(
                total_floors=self.config.total_floors,
                submit=self.simulation.controller.submit,
                min_delay=self.config.min_request_delay,
                max_delay=self.config.max_request_delay,
                random_seed=self.config.random_seed,
            )
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        # Manual submissions get ids well clear of the generator's.
        self._next_manual_id = 1_000_000

    async def start(self) -> None:
        if self._task is None:
            if self.generator is not None:
                self.generator.start()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self.generator is not None:
            self.generator.stop()
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        started = deadline = time.monotonic()
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state()
            await self.broadcast(payload)
            deadline += self.tick_interval
            if self.run_duration and deadline - started >= self.run_duration:
                break
            await asyncio.sleep(max(0.0, deadline - time.monotonic()))
        if self.generator is not None:
            self.generator.stop()
        logger.info("Simulation finished at tick %s", self.simulation.current_tick)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
            except Exception:
                logger.warning("Dropping websocket client after failed send", exc_info=True)
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        return self.simulation.current_state()

    def metrics(self) -> dict:
        controller = self.simulation.controller
        return asdict(controller.metrics.snapshot(controller.current_tick))

    def submit(self, origin: int, destination: int, passenger_id: Optional[int]) -> Request:
        if passenger_id is None:
            passenger_id = self._next_manual_id
            self._next_manual_id += 1
        request = Request(origin=origin, destination=destination, passenger_id=passenger_id)
        self.simulation.controller.submit(request)
        return request

    async def set_scheduler(self, name: str, options: Dict[str, object]) -> dict:
        async with self._lock:
            self.simulation.controller.set_scheduler(name, **options)
            return self.current_state()


def create_app(manager: Optional[SimulationManager] = None) -> FastAPI:
    manager = manager or SimulationManager(SimulationConfig(run_duration=0.0), with_traffic=True)
    app = FastAPI(title="Elevator Dispatch Simulation API")
    app.state.manager = manager
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        await manager.start()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await manager.stop()

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.get("/metrics")
    async def get_metrics() -> dict:
        return manager.metrics()

    @app.post("/requests", status_code=202)
    async def submit_request(submission: RequestSubmission) -> dict:
        try:
            request = manager.submit(submission.origin, submission.destination, submission.passenger_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return request.as_dict()

    @app.post("/algorithm")
    async def set_algorithm(selection: AlgorithmSelection) -> dict:
        try:
            return await manager.set_scheduler(selection.name, selection.options)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc))

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
