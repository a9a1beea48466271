import asyncpg  # type: ignore[import-untyped]

# Failures raised by asyncpg while talking to the store. OSError covers
# refused connections and socket timeouts.
DATABASE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)
