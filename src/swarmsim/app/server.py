from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import asdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Optional, Protocol, Set

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..config import AppConfig, SimulationConfig
from ..sim.core.errors import SwarmError
from ..sim.core.simulation import Simulation
from ..sim.systems.metrics import create_metrics
from ..sim.types.generation import Generation
from ..sim.types.metrics import GenerationMetrics
from .messages import GenerateRequest, error_message, parse_generate_request

logger = logging.getLogger(__name__)


class TextClient(Protocol):
    async def send_text(self, data: str) -> None: ...


class SwarmController:
    def __init__(self, config: SimulationConfig):
        self.config = config
        self.simulation = Simulation(config)
        self.clients: Set[WebSocket] = set()
        self.generations_sent = 0
        self.last_metrics: Optional[GenerationMetrics] = None
        self._lock = asyncio.Lock()
        # one worker thread: batches never run concurrently and never block the loop
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="swarmsim-generate")
        self._tasks: Set[asyncio.Task] = set()

    async def handle_message(self, client: TextClient, message: str) -> None:
        try:
            payload = json.loads(message)
        except json.JSONDecodeError:
            await self._send_error(client, "Message is not valid JSON")
            return
        if not isinstance(payload, dict):
            await self._send_error(client, "Message must be a JSON object")
            return

        kind = payload.get("type")
        if kind == "update-nextPosition":
            self.simulation.set_policy(payload.get("value"))
        elif kind == "generate":
            try:
                request = parse_generate_request(payload)
            except SwarmError as exc:
                logger.warning("Rejected generate request: %s", exc)
                await self._send_error(client, str(exc))
                return
            task = asyncio.create_task(self.generate(client, request))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            await self._send_error(client, f"Unknown message type {kind!r}")

    async def generate(self, client: TextClient, request: GenerateRequest) -> None:
        if request.todo == 0:
            return
        async with self._lock:
            try:
                await self._stream_batch(client, request)
            except SwarmError as exc:
                logger.warning("Generation batch from iteration %d failed: %s", request.iteration, exc)
                await self._send_error(client, str(exc))

    async def reset(self) -> None:
        async with self._lock:
            self.simulation.reset()
            self.generations_sent = 0
            self.last_metrics = None

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    async def _stream_batch(self, client: TextClient, request: GenerateRequest) -> None:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[Optional[str]] = asyncio.Queue()

        def produce() -> None:
            generations = self.simulation.generate(
                request.iteration,
                request.todo,
                request.state,
                request.vision_range,
                dimension=request.dimension,
                preserve_connectivity=request.preserve_connectivity,
            )
            previous = Generation(request.iteration - 1, tuple(request.state))
            for generation in generations:
                loop.call_soon_threadsafe(queue.put_nowait, json.dumps(generation.to_message()))
                self.last_metrics = create_metrics(generation, previous, request.vision_range)
                previous = generation

        future = loop.run_in_executor(self._executor, produce)
        future.add_done_callback(lambda _: queue.put_nowait(None))

        connected = True
        while True:
            payload = await queue.get()
            if payload is None:
                break
            if not connected:
                continue
            try:
                await client.send_text(payload)
            except WebSocketDisconnect:
                connected = False
                self.clients.discard(client)  # type: ignore[arg-type]
                continue
            self.generations_sent += 1
        await future

    async def _send_error(self, client: TextClient, message: str) -> None:
        try:
            await client.send_text(json.dumps(error_message(message)))
        except WebSocketDisconnect:
            self.clients.discard(client)  # type: ignore[arg-type]

    def status(self) -> dict[str, Any]:
        return {
            "dimension": self.config.dimension,
            "vision_range": self.config.vision_range,
            "next_position": self.simulation.policy.value,
            "preserve_connectivity": self.config.preserve_connectivity,
            "generations_sent": self.generations_sent,
            "clients": len(self.clients),
            "busy": self._lock.locked(),
            "metrics": asdict(self.last_metrics) if self.last_metrics else None,
        }


def _load_app_config() -> AppConfig:
    path = os.environ.get("SWARMSIM_CONFIG")
    if path:
        return AppConfig.from_yaml(Path(path))
    return AppConfig()


app_config = _load_app_config()
logging.getLogger("swarmsim").setLevel(app_config.log_level)
app = FastAPI(title="Swarm Convergence Simulation")
controller = SwarmController(app_config.simulation)


@app.on_event("shutdown")
async def _shutdown() -> None:
    await controller.drain()
    controller.shutdown()


@app.get("/api/status")
async def status() -> JSONResponse:
    return JSONResponse(controller.status())


@app.post("/api/control/next-position")
async def set_next_position(payload: dict) -> JSONResponse:
    policy = controller.simulation.set_policy(payload.get("value"))
    return JSONResponse({"next_position": policy.value})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse(controller.status())


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            await controller.handle_message(websocket, message)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)


__all__ = ["app", "controller", "SwarmController"]
