"""
Tests for composing global and project hookfiles into CookedHooks.
"""

import asyncio
import dataclasses
from pathlib import Path

import pytest

from hookfile.core.hooks.categories import HookCategory
from hookfile.core.hooks.composer import compose_hooks, filter_log, require_hooks, run_hook_chain
from hookfile.core.hooks.context import HookContext, PreResolutionLogger
from hookfile.core.hooks.errors import HookfileLoadError, HookfileNotFoundError
from hookfile.core.hooks.models import CookedHooks, HookDeclarationSet

GLOBAL_FILE = Path("/etc/hookfile/global.py")
PROJECT_FILE = Path("/work/app/.hookfile.py")
ROOT = Path("/work/app")


def global_decl(**hooks) -> HookDeclarationSet:
    return HookDeclarationSet(filename=GLOBAL_FILE, **hooks)


def project_decl(**hooks) -> HookDeclarationSet:
    return HookDeclarationSet(filename=PROJECT_FILE, **hooks)


async def fake_checksum(path: Path) -> str:
    return f"sum:{path.name}"


# ---------------------------------------------------------------------------
# Empty / absent hookfiles
# ---------------------------------------------------------------------------


class TestNoHookfiles:
    def test_returns_canonical_empty_bundle(self, sink):
        hooks = compose_hooks(ROOT, None, None, sink=sink)
        assert hooks == CookedHooks()

    def test_sequences_present_and_empty(self, sink):
        hooks = compose_hooks(ROOT, None, None, sink=sink)
        assert hooks.read_package == ()
        assert hooks.after_all_resolved == ()
        assert hooks.filter_log == ()

    def test_singles_and_checksum_absent(self, sink):
        hooks = compose_hooks(ROOT, None, None, sink=sink)
        assert hooks.import_package is None
        assert hooks.pre_resolution is None
        assert hooks.fetchers is None
        assert hooks.calculate_checksum is None

    def test_empty_global_hookfile_has_no_checksum(self, sink):
        hooks = compose_hooks(ROOT, global_decl(), None, sink=sink)
        assert hooks.read_package == ()
        assert hooks.calculate_checksum is None

    def test_bundle_is_immutable(self, sink):
        hooks = compose_hooks(ROOT, global_decl(read_package=lambda p, c: p), None, sink=sink)
        assert isinstance(hooks.read_package, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            hooks.read_package = ()

    def test_fetchers_are_read_only(self, sink):
        fetchers = {"git": lambda *a: None}
        hooks = compose_hooks(ROOT, global_decl(fetchers=fetchers), None, sink=sink)

        with pytest.raises(TypeError):
            hooks.fetchers["tarball"] = lambda *a: None
        # Mutating the hookfile's own dict does not reach the bundle either
        fetchers["tarball"] = lambda *a: None
        assert list(hooks.fetchers) == ["git"]


# ---------------------------------------------------------------------------
# Multi-value categories
# ---------------------------------------------------------------------------


class TestOrderedCategories:
    def test_global_read_package_patches_manifest(self, sink):
        hooks = compose_hooks(
            ROOT, global_decl(read_package=lambda pkg, ctx: {**pkg, "patched": True}), None, sink=sink
        )
        assert len(hooks.read_package) == 1
        assert hooks.read_package[0]({"name": "x"}) == {"name": "x", "patched": True}

    def test_global_runs_before_project(self, sink):
        calls = []

        def global_hook(pkg, ctx):
            calls.append(("global", dict(pkg)))
            return {**pkg, "seen": ["global"]}

        def project_hook(pkg, ctx):
            calls.append(("project", dict(pkg)))
            return {**pkg, "seen": pkg["seen"] + ["project"]}

        hooks = compose_hooks(
            ROOT,
            global_decl(read_package=global_hook),
            project_decl(read_package=project_hook),
            sink=sink,
        )
        assert len(hooks.read_package) == 2

        result = asyncio.run(run_hook_chain(hooks.read_package, {"name": "x"}))

        assert result == {"name": "x", "seen": ["global", "project"]}
        assert calls[0] == ("global", {"name": "x"})
        assert calls[1] == ("project", {"name": "x", "seen": ["global"]})

    def test_after_all_resolved_from_project_only(self, sink):
        hooks = compose_hooks(
            ROOT, None, project_decl(after_all_resolved=lambda lock, ctx: {**lock, "ok": 1}), sink=sink
        )
        assert len(hooks.after_all_resolved) == 1
        assert hooks.after_all_resolved[0]({}) == {"ok": 1}

    def test_hook_receives_context_bound_to_origin(self, sink):
        contexts = []

        def capture(value, ctx):
            contexts.append(ctx)
            return value

        hooks = compose_hooks(
            ROOT,
            global_decl(after_all_resolved=capture),
            project_decl(after_all_resolved=capture),
            sink=sink,
        )
        for hook in hooks.after_all_resolved:
            hook({})

        assert [type(c) for c in contexts] == [HookContext, HookContext]
        assert contexts[0].origin == str(GLOBAL_FILE)
        assert contexts[1].origin == str(PROJECT_FILE)
        assert contexts[0].category == HookCategory.AFTER_ALL_RESOLVED

    def test_context_log_emits_structured_record(self, sink):
        def noisy(pkg, ctx):
            ctx.log("hello")
            return pkg

        hooks = compose_hooks(ROOT, None, project_decl(read_package=noisy), sink=sink)
        hooks.read_package[0]({"name": "x"})

        assert sink.records == [
            ("debug", {
                "from": str(PROJECT_FILE),
                "hook": "read_package",
                "message": "hello",
                "prefix": str(ROOT),
            })
        ]

    def test_filter_log_both_invoked_in_order(self, sink):
        seen = []

        def global_filter(log, ctx):
            seen.append("global")
            return False

        def project_filter(log, ctx):
            seen.append("project")
            return True

        hooks = compose_hooks(
            ROOT,
            global_decl(filter_log=global_filter),
            project_decl(filter_log=project_filter),
            sink=sink,
        )
        assert len(hooks.filter_log) == 2
        assert filter_log(hooks, {"level": "debug"}) is False
        assert seen == ["global", "project"]

    def test_filter_log_with_no_filters_accepts(self, sink):
        assert filter_log(compose_hooks(ROOT, None, None, sink=sink), {"level": "info"}) is True


# ---------------------------------------------------------------------------
# Global-only categories
# ---------------------------------------------------------------------------


class TestGlobalOnlyCategories:
    def test_project_declarations_are_ignored(self, sink):
        project = project_decl(
            import_package=lambda *a: None,
            pre_resolution=lambda ctx, logger: None,
            fetchers={"git": lambda *a: None},
        )
        hooks = compose_hooks(ROOT, None, project, sink=sink)
        assert hooks.import_package is None
        assert hooks.pre_resolution is None
        assert hooks.fetchers is None

    def test_ignoring_project_declarations_is_silent_on_sink(self, sink):
        compose_hooks(ROOT, None, project_decl(import_package=lambda *a: None), sink=sink)
        assert sink.records == []

    def test_global_declarations_win_over_project(self, sink):
        def global_import(*args):
            return "global"

        fetchers = {"tarball": lambda *a: "fetched"}
        hooks = compose_hooks(
            ROOT,
            global_decl(import_package=global_import, fetchers=fetchers),
            project_decl(import_package=lambda *a: "project", fetchers={"git": lambda *a: None}),
            sink=sink,
        )
        assert hooks.import_package is global_import
        assert dict(hooks.fetchers) == fetchers

    def test_pre_resolution_gets_dedicated_logger(self, sink):
        received = {}

        def pre_resolution(ctx, logger):
            received["ctx"] = ctx
            received["logger"] = logger
            logger.info("starting")
            logger.warn("careful")
            return "done"

        hooks = compose_hooks(ROOT, global_decl(pre_resolution=pre_resolution), None, sink=sink)

        assert hooks.pre_resolution({"lockfile": {}}) == "done"
        assert received["ctx"] == {"lockfile": {}}
        assert isinstance(received["logger"], PreResolutionLogger)
        assert sink.records == [
            ("info", {"message": "starting", "prefix": str(ROOT), "hook": "pre_resolution"}),
            ("warn", {"message": "careful", "prefix": str(ROOT), "hook": "pre_resolution"}),
        ]


# ---------------------------------------------------------------------------
# Checksum provider
# ---------------------------------------------------------------------------


class TestChecksumProvider:
    def test_present_for_empty_project_hookfile(self, sink):
        hooks = compose_hooks(ROOT, None, project_decl(), sink=sink, checksum=fake_checksum)
        assert hooks.calculate_checksum is not None
        assert asyncio.run(hooks.calculate_checksum()) == "sum:.hookfile.py"

    def test_absent_without_project_hookfile(self, sink):
        hooks = compose_hooks(
            ROOT, global_decl(read_package=lambda p, c: p), None, sink=sink, checksum=fake_checksum
        )
        assert hooks.calculate_checksum is None

    def test_computed_on_every_call(self, sink):
        calls = []

        async def counting(path):
            calls.append(path)
            return str(len(calls))

        hooks = compose_hooks(ROOT, None, project_decl(), sink=sink, checksum=counting)
        assert asyncio.run(hooks.calculate_checksum()) == "1"
        assert asyncio.run(hooks.calculate_checksum()) == "2"
        assert calls == [PROJECT_FILE, PROJECT_FILE]

    def test_checksum_failure_propagates(self, sink):
        async def broken(path):
            raise FileNotFoundError(path)

        hooks = compose_hooks(ROOT, None, project_decl(), sink=sink, checksum=broken)
        with pytest.raises(FileNotFoundError):
            asyncio.run(hooks.calculate_checksum())


# ---------------------------------------------------------------------------
# Async hooks and error propagation
# ---------------------------------------------------------------------------


class TestAsyncAndErrors:
    @pytest.mark.asyncio
    async def test_wrapper_returns_pending_result(self, sink):
        async def slow(pkg, ctx):
            await asyncio.sleep(0)
            return {**pkg, "async": True}

        hooks = compose_hooks(ROOT, global_decl(read_package=slow), None, sink=sink)
        pending = hooks.read_package[0]({"name": "x"})
        assert asyncio.iscoroutine(pending)
        assert await pending == {"name": "x", "async": True}

    @pytest.mark.asyncio
    async def test_chain_awaits_each_entry_before_the_next(self, sink):
        order = []

        async def global_hook(lock, ctx):
            await asyncio.sleep(0.01)
            order.append("global")
            return lock + ["global"]

        def project_hook(lock, ctx):
            order.append("project")
            return lock + ["project"]

        hooks = compose_hooks(
            ROOT,
            global_decl(after_all_resolved=global_hook),
            project_decl(after_all_resolved=project_hook),
            sink=sink,
        )
        result = await run_hook_chain(hooks.after_all_resolved, [])
        assert result == ["global", "project"]
        assert order == ["global", "project"]

    def test_hook_errors_propagate(self, sink):
        def broken(pkg, ctx):
            raise ValueError("bad manifest")

        hooks = compose_hooks(ROOT, None, project_decl(read_package=broken), sink=sink)
        with pytest.raises(ValueError, match="bad manifest"):
            hooks.read_package[0]({"name": "x"})

    @pytest.mark.asyncio
    async def test_async_hook_errors_propagate(self, sink):
        async def broken(lock, ctx):
            raise RuntimeError("resolution failed")

        hooks = compose_hooks(ROOT, global_decl(after_all_resolved=broken), None, sink=sink)
        with pytest.raises(RuntimeError, match="resolution failed"):
            await run_hook_chain(hooks.after_all_resolved, {})


# ---------------------------------------------------------------------------
# require_hooks: loading from disk
# ---------------------------------------------------------------------------


class TestRequireHooks:
    def test_no_hookfiles_on_disk(self, project_root, sink):
        assert require_hooks(project_root, sink=sink) == CookedHooks()

    def test_loads_default_project_hookfile(self, project_root, write_hookfile, sink):
        write_hookfile(project_root / ".hookfile.py", """
            def after_all_resolved(lockfile, context):
                context.log("resolved")
                return {**lockfile, "checked": True}

            hooks = {"after_all_resolved": after_all_resolved}
        """)
        hooks = require_hooks(project_root, sink=sink)

        assert hooks.after_all_resolved[0]({}) == {"checked": True}
        assert sink.records[0][1]["from"] == str(project_root / ".hookfile.py")
        assert hooks.calculate_checksum is not None

    def test_global_and_project_from_disk(self, project_root, tmp_path, write_hookfile, sink):
        global_file = write_hookfile(tmp_path / "global" / "hooks.py", """
            def read_package(pkg, context):
                pkg["tags"] = ["global"]
                return pkg

            def import_package(*args):
                return "global import"

            hooks = {"read_package": read_package, "import_package": import_package}
        """)
        write_hookfile(project_root / ".hookfile.py", """
            def read_package(pkg, context):
                pkg["tags"].append("project")
                return pkg

            hooks = {"read_package": read_package, "import_package": lambda *a: "project"}
        """)
        hooks = require_hooks(project_root, global_hookfile=global_file, sink=sink)

        result = asyncio.run(run_hook_chain(hooks.read_package, {"name": "x"}))
        assert result["tags"] == ["global", "project"]
        assert hooks.import_package() == "global import"

    def test_relative_global_hookfile_resolves_against_project(self, project_root, write_hookfile, sink):
        write_hookfile(project_root / "config" / "global.py", """
            hooks = {"filter_log": lambda log, context: log["level"] != "debug"}
        """)
        hooks = require_hooks(project_root, global_hookfile="config/global.py", sink=sink)
        assert filter_log(hooks, {"level": "debug"}) is False
        assert hooks.calculate_checksum is None

    def test_missing_global_hookfile_is_fatal(self, project_root, sink):
        with pytest.raises(HookfileNotFoundError) as exc_info:
            require_hooks(project_root, global_hookfile="nope.py", sink=sink)
        assert exc_info.value.path == project_root / "nope.py"

    def test_missing_explicit_project_hookfile_is_fatal(self, project_root, sink):
        with pytest.raises(HookfileNotFoundError):
            require_hooks(project_root, hookfile="custom-hooks.py", sink=sink)

    def test_broken_hookfile_aborts(self, project_root, write_hookfile, sink):
        path = write_hookfile(project_root / ".hookfile.py", "hooks = {\n")
        with pytest.raises(HookfileLoadError) as exc_info:
            require_hooks(project_root, sink=sink)
        assert exc_info.value.path == path

    def test_ignore_hookfile_skips_both(self, project_root, write_hookfile, sink):
        write_hookfile(project_root / ".hookfile.py", "raise RuntimeError('should not be imported')\n")
        hooks = require_hooks(
            project_root, global_hookfile="missing-global.py", ignore_hookfile=True, sink=sink
        )
        assert hooks == CookedHooks()

    def test_read_package_may_return_empty_manifest(self, project_root, write_hookfile, sink):
        write_hookfile(project_root / ".hookfile.py", """
            hooks = {"read_package": lambda pkg, context: {}}
        """)
        hooks = require_hooks(project_root, sink=sink)
        assert hooks.read_package[0]({"name": "x"}) == {}
