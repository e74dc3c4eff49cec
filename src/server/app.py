from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import Dict, Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dispatch import Direction, DispatchConfig
from simulation import Building, Elevator, Simulation

logger = logging.getLogger(__name__)


class PickerSelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


class HallCallRequest(BaseModel):
    floor: int
    direction: Literal["up", "down"]


class CarRequest(BaseModel):
    floor: int


class SpawnBatchRequest(BaseModel):
    origin: int
    count: int = 5
    destination: Optional[int] = None


class SimulationManager:
    """Owns one simulated bank of elevators and serialises all access to it.

    Every tick and every externally injected button press runs under the
    same lock, so the dispatcher always sees one event at a time.
    """

    def __init__(
        self,
        num_floors: int = 20,
        elevator_count: int = 4,
        tick_interval: float = 0.5,
        dispatch_config: Optional[DispatchConfig] = None,
    ) -> None:
        elevators = [Elevator(i) for i in range(elevator_count)]
        building = Building(
            num_floors=num_floors,
            elevators=elevators,
            dispatch_config=dispatch_config or DispatchConfig(strict_claims=False),
        )
        self.simulation = Simulation(building=building, arrival_rate_per_floor=0.02)
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
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
        metrics = asdict(self.simulation.metrics.snapshot(self.simulation.current_time))
        return {
            "time": self.simulation.current_time,
            "building": self.simulation.building.snapshot(),
            "metrics": metrics,
            "picker": self.simulation.building.picker_name,
        }

    async def set_picker(self, name: str, options: Dict[str, object]) -> dict:
        async with self._lock:
            self.simulation.building.set_picker(name, **options)
            logger.info("picker switched to %s", name)
            return self.current_state()

    async def press_hall_call(self, floor: int, direction: Direction) -> dict:
        async with self._lock:
            lit = self.simulation.building.press_hall_call(floor, direction)
            state = self.current_state()
            state["newly_lit"] = lit
            return state

    async def press_car_button(self, elevator_id: int, floor: int) -> dict:
        async with self._lock:
            lit = self.simulation.building.press_car_button(elevator_id, floor)
            state = self.current_state()
            state["newly_lit"] = lit
            return state

    async def spawn_batch(self, origin: int, count: int, destination: Optional[int]) -> dict:
        async with self._lock:
            spawned = self.simulation.spawn_passenger_batch(origin, count, destination)
            state = self.current_state()
            state["spawned"] = spawned
            return state


manager = SimulationManager()
app = FastAPI(title="Elevator Dispatch API")
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


@app.post("/picker")
async def set_picker(selection: PickerSelection) -> dict:
    try:
        return await manager.set_picker(selection.name, selection.options)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/hall-calls")
async def press_hall_call(request: HallCallRequest) -> dict:
    try:
        return await manager.press_hall_call(request.floor, Direction(request.direction))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/elevators/{elevator_id}/car-requests")
async def press_car_button(elevator_id: int, request: CarRequest) -> dict:
    try:
        return await manager.press_car_button(elevator_id, request.floor)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/passengers/spawn")
async def spawn_batch(request: SpawnBatchRequest) -> dict:
    try:
        return await manager.spawn_batch(request.origin, request.count, request.destination)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
