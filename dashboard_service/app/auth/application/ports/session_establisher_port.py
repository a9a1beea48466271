from typing import Any, Mapping, MutableMapping, Protocol


class SessionEstablisherPort(Protocol):
    async def sign_in(
        self,
        provider_id: str,
        form: Mapping[str, Any],
        session: MutableMapping[str, Any],
    ) -> None: ...
