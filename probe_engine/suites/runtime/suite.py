"""Probes for optional capabilities of the running Python interpreter."""

import asyncio
import importlib
from collections.abc import Sequence

from probe_engine.models.descriptor import ProbeDefinition, ProbeOptions
from probe_engine.models.outcome import Outcome, Status
from probe_engine.suites.base import ProbeSuite

CATEGORY = "runtime"
COMPRESSION_MODULES = ("zlib", "bz2", "lzma")


class RuntimeSuite(ProbeSuite):
    """Checks the interpreter for modules that are optional at build time."""

    def get_all_tests(self) -> Sequence[ProbeDefinition]:
        return [
            ProbeDefinition(
                name="Event Loop",
                probe=self.check_event_loop,
                options=ProbeOptions(
                    category=CATEGORY,
                    priority=10,
                    description="Run a coroutine on the current event loop",
                ),
            ),
            ProbeDefinition(
                name="SSL Support",
                probe=self.check_ssl,
                options=ProbeOptions(
                    category=CATEGORY,
                    priority=9,
                    description="Import the ssl module and report OpenSSL",
                ),
            ),
            ProbeDefinition(
                name="TLS 1.3",
                probe=self.check_tls13,
                options=ProbeOptions(
                    category=CATEGORY,
                    priority=7,
                    description="Check that OpenSSL was built with TLS 1.3",
                    dependencies=("SSL Support",),
                ),
            ),
            ProbeDefinition(
                name="SQLite",
                probe=self.check_sqlite,
                options=ProbeOptions(
                    category=CATEGORY,
                    priority=8,
                    description="Open an in-memory SQLite database",
                ),
            ),
            ProbeDefinition(
                name="Compression Codecs",
                probe=self.check_compression,
                options=ProbeOptions(
                    category=CATEGORY,
                    priority=5,
                    description="Import the zlib, bz2 and lzma modules",
                ),
            ),
        ]

    async def check_event_loop(self) -> Outcome:
        loop = asyncio.get_running_loop()
        await asyncio.sleep(0)
        return Outcome(status="supported", details={"loop": type(loop).__name__})

    async def check_ssl(self) -> Outcome:
        try:
            ssl = importlib.import_module("ssl")
        except ImportError as exc:
            return Outcome(status="unsupported", details=str(exc))
        return Outcome(
            status="supported", details={"openssl_version": ssl.OPENSSL_VERSION}
        )

    async def check_tls13(self) -> bool:
        ssl = importlib.import_module("ssl")
        return bool(ssl.HAS_TLSv1_3)

    async def check_sqlite(self) -> Outcome:
        try:
            sqlite3 = importlib.import_module("sqlite3")
        except ImportError as exc:
            return Outcome(status="unsupported", details=str(exc))

        connection = sqlite3.connect(":memory:")
        try:
            (version,) = connection.execute("select sqlite_version()").fetchone()
        finally:
            connection.close()
        return Outcome(status="supported", details={"sqlite_version": version})

    async def check_compression(self) -> Outcome:
        available = []
        for module_name in COMPRESSION_MODULES:
            try:
                importlib.import_module(module_name)
            except ImportError:
                continue
            available.append(module_name)

        score = round(len(available) / len(COMPRESSION_MODULES) * 100)
        status: Status
        if score == 100:
            status = "supported"
        elif available:
            status = "partial"
        else:
            status = "unsupported"
        return Outcome(status=status, details={"available": available}, score=score)
