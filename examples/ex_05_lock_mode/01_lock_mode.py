"""Lock mode: share one container between threads.

``LockMode.THREAD`` serializes ``get`` through a re-entrant lock so a
singleton is built once even when many threads ask for it at the same time.
``LockMode.NONE`` is the default and assumes single-threaded use.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from keywire import ContainerBuilder, Key, LockMode, inject

BUILDS = 0
_builds_guard = threading.Lock()


class ExpensiveClient:
    def __init__(self) -> None:
        global BUILDS  # noqa: PLW0603
        with _builds_guard:
            BUILDS += 1


CLIENT = Key("ExpensiveClient", ExpensiveClient)


def main() -> None:
    container = (
        ContainerBuilder.create()
        .register_singleton(CLIENT, inject(ExpensiveClient, []))
        .build(lock_mode=LockMode.THREAD)
    )

    with ThreadPoolExecutor(max_workers=8) as executor:
        clients = list(executor.map(lambda _: container.get(CLIENT), range(32)))

    print(f"lock_mode={container.lock_mode.name}")  # => lock_mode=THREAD
    print(f"builds={BUILDS}")  # => builds=1
    print(f"same_client={all(client is clients[0] for client in clients)}")  # => same_client=True


if __name__ == "__main__":
    main()
