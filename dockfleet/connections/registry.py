"""Реестр эндпоинтов: добавление/удаление, опрос всех демонов, автопоиск контейнера."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError
from typing import Callable, Dict, Generic, Iterator, List, NamedTuple, Optional, Tuple, TypeVar

from dockfleet.connections.endpoint import EndpointConnection
from dockfleet.connections.models import EndpointConfig
from dockfleet.docker_api.exceptions import (
    EndpointNotFoundError,
    NoEndpointsError,
    NotFoundError,
)
from dockfleet.docker_api.models import ContainerSummary

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
EndpointFactory = Callable[[EndpointConfig], EndpointConnection]


class _TimedCall(Generic[T]):
    """Вызов на одном эндпоинте; запоминает момент фактического старта в пуле."""

    def __init__(self, call: Callable[[EndpointConnection], T], endpoint: EndpointConnection) -> None:
        self._call = call
        self._endpoint = endpoint
        self.started = threading.Event()
        self.started_at = 0.0

    def __call__(self) -> T:
        self.started_at = time.monotonic()
        self.started.set()
        return self._call(self._endpoint)

    def remaining(self, timeout: Optional[float], start_deadline: Optional[float]) -> Optional[float]:
        """Сколько ещё ждать результата: timeout считается от старта вызова."""

        if timeout is None or start_deadline is None:
            return None
        if not self.started.wait(max(0.0, start_deadline - time.monotonic())):
            return 0.0
        return max(0.0, self.started_at + timeout - time.monotonic())


class ContainerLocation(NamedTuple):
    """Эндпоинт, на котором найден контейнер."""

    name: str
    endpoint: EndpointConnection


class EndpointRegistry:
    """Именованный набор EndpointConnection.

    Порядок добавления сохраняется: он определяет порядок результатов
    и приоритет при автопоиске контейнера.
    """

    def __init__(
        self,
        endpoint_factory: EndpointFactory = EndpointConnection,
        *,
        timeout: Optional[float] = 5.0,
        max_workers: int = 8,
    ) -> None:
        self._factory = endpoint_factory
        self._timeout = timeout if timeout and timeout > 0 else None
        self._max_workers = max(1, max_workers)
        self._endpoints: Dict[str, EndpointConnection] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ CRUD --
    def add(self, config: EndpointConfig) -> EndpointConnection:
        """Создаёт соединение и сохраняет его; одноимённое заменяется."""

        endpoint = self._factory(config)
        with self._lock:
            previous = self._endpoints.pop(endpoint.name, None)
            self._endpoints[endpoint.name] = endpoint
        if previous is not None:
            LOGGER.warning("Endpoint %s replaced with a new configuration", endpoint.name)
            previous.close()
        LOGGER.info("Endpoint %s added (%s)", endpoint.name, endpoint.base_url)
        return endpoint

    def remove(self, name: str) -> bool:
        """Удаляет эндпоинт; False, если такого имени не было."""

        with self._lock:
            endpoint = self._endpoints.pop(name, None)
        if endpoint is None:
            return False
        endpoint.close()
        LOGGER.info("Endpoint %s removed", name)
        return True

    def names(self) -> List[str]:
        with self._lock:
            return list(self._endpoints)

    def get(self, name: str) -> Optional[EndpointConnection]:
        with self._lock:
            return self._endpoints.get(name)

    def require(self, name: str) -> EndpointConnection:
        """Как get, но при отсутствии эндпоинта бросает ошибку со списком доступных."""

        endpoint = self.get(name)
        if endpoint is None:
            raise EndpointNotFoundError(name, self.names())
        return endpoint

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._endpoints

    def close(self) -> None:
        with self._lock:
            endpoints = list(self._endpoints.values())
        for endpoint in endpoints:
            endpoint.close()

    # -------------------------------------------------------------- fan-out --
    def ping_all(self) -> Dict[str, bool]:
        """Доступность каждого эндпоинта; не ответившие в срок считаются недоступными."""

        status = {name: False for name in self.names()}
        for name, _, alive in self._fan_out("ping", lambda endpoint: endpoint.ping()):
            status[name] = alive
        return status

    def list_all_containers(
        self, include_stopped: bool = False, *, require_endpoints: bool = False
    ) -> List[ContainerSummary]:
        """Контейнеры всех доступных эндпоинтов одним списком."""

        result: List[ContainerSummary] = []
        for _, _, containers in self._fan_out(
            "list containers",
            lambda endpoint: endpoint.list_containers(include_stopped),
            require_endpoints=require_endpoints,
        ):
            result.extend(containers)
        return result

    def list_all_images(self, *, require_endpoints: bool = False) -> Dict[str, List[dict]]:
        """Образы, сгруппированные по имени эндпоинта."""

        return {
            name: items
            for name, _, items in self._fan_out(
                "list images",
                lambda endpoint: endpoint.list_images(),
                require_endpoints=require_endpoints,
            )
        }

    def list_all_networks(self, *, require_endpoints: bool = False) -> Dict[str, List[dict]]:
        return {
            name: items
            for name, _, items in self._fan_out(
                "list networks",
                lambda endpoint: endpoint.list_networks(),
                require_endpoints=require_endpoints,
            )
        }

    def list_all_volumes(self, *, require_endpoints: bool = False) -> Dict[str, List[dict]]:
        return {
            name: items
            for name, _, items in self._fan_out(
                "list volumes",
                lambda endpoint: endpoint.list_volumes(),
                require_endpoints=require_endpoints,
            )
        }

    def find_container(self, identifier: str) -> Optional[ContainerLocation]:
        """Первый по порядку регистрации эндпоинт, где есть контейнер с таким id или именем.

        Неотвечающие эндпоинты пропускаются; при совпадении на нескольких
        эндпоинтах побеждает добавленный раньше.
        """

        for name, endpoint, containers in self._fan_out(
            "search containers",
            lambda target: target.list_containers(True),
        ):
            if any(identifier in (container.identifier, container.name) for container in containers):
                LOGGER.debug("Container %s located on %s", identifier, name)
                return ContainerLocation(name, endpoint)
        return None

    def resolve(self, identifier: str, endpoint_name: Optional[str] = None) -> ContainerLocation:
        """Явно указанный эндпоинт либо результат автопоиска."""

        if endpoint_name:
            return ContainerLocation(endpoint_name, self.require(endpoint_name))
        location = self.find_container(identifier)
        if location is None:
            raise NotFoundError(f"Container '{identifier}' not found on any Docker server")
        return location

    def _fan_out(
        self,
        action: str,
        call: Callable[[EndpointConnection], T],
        *,
        require_endpoints: bool = False,
    ) -> Iterator[Tuple[str, EndpointConnection, T]]:
        """Выполняет call на всех эндпоинтах параллельно.

        Результаты отдаются в порядке регистрации; ошибка или таймаут одного
        эндпоинта логируется и не прерывает остальные. Таймаут отсчитывается
        от фактического старта вызова, а не от постановки в очередь пула.
        Ожидание старта ограничено таймаутом, умноженным на число волн пула.
        Генератор можно бросить на полпути: незапущенные вызовы отменяются.
        """

        with self._lock:
            snapshot = list(self._endpoints.items())
        if not snapshot:
            if require_endpoints:
                raise NoEndpointsError()
            return

        workers = min(self._max_workers, len(snapshot))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dockfleet-fanout")
        waves = -(-len(snapshot) // workers)
        start_deadline = None if self._timeout is None else time.monotonic() + self._timeout * waves
        try:
            pending: List[Tuple[str, EndpointConnection, _TimedCall[T], Future[T]]] = []
            for name, endpoint in snapshot:
                timed = _TimedCall(call, endpoint)
                pending.append((name, endpoint, timed, pool.submit(timed)))
            for name, endpoint, timed, future in pending:
                try:
                    value = future.result(timeout=timed.remaining(self._timeout, start_deadline))
                except TimeoutError:
                    future.cancel()
                    LOGGER.error(
                        "Failed to %s from %s: no answer within %s seconds",
                        action,
                        name,
                        self._timeout,
                    )
                    continue
                except Exception as exc:
                    LOGGER.error("Failed to %s from %s: %s", action, name, exc)
                    continue
                yield name, endpoint, value
        finally:
            # зависшие вызовы не ждём: поток дорабатывает в фоне
            pool.shutdown(wait=False, cancel_futures=True)
