# tt_installer/phases/sdk.py
# -*- coding: utf-8 -*-
"""
Optional SDK phases: profiling dependencies, TT-Metalium, TT-Buda and TT-Forge.

Each SDK is cloned under the install root and built with its own commands,
run inside the clone with the SDK environment (TT_METAL_HOME, ARCH_NAME,
PYTHONPATH) added.
"""

from pathlib import Path
from typing import Callable, Optional

from common.command_utils import log_installer
from common.debian.apt_manager import AptManager
from common.file_utils import make_temp_file, remove_path
from common.phase_models import PhaseContext, PhaseOutcome
from tt_installer.config_models import SdkComponentSettings


def install_profiling_deps(ctx: PhaseContext) -> PhaseOutcome:
    packages = ctx.app_settings.sdk.profiling_packages
    try:
        apt = AptManager(ctx.installer, ctx.logger)
    except FileNotFoundError as e:
        return PhaseOutcome.failure(str(e))
    if not apt.install(packages):
        return PhaseOutcome.failure(
            f"Failed to install profiling dependencies: {' '.join(packages)}"
        )
    return PhaseOutcome.success("Profiling dependencies installed.")


def clone_and_build(
    ctx: PhaseContext,
    label: str,
    component: SdkComponentSettings,
    before_build: Optional[Callable[[PhaseContext, Path], PhaseOutcome]] = None,
) -> PhaseOutcome:
    """
    Clone `component` into <install_root>/<dir_name> and run its build
    commands there. `before_build` runs between clone and build and aborts the
    phase when it returns a failure.
    """
    app_settings = ctx.app_settings
    symbols = app_settings.symbols
    target = app_settings.install_root / component.dir_name

    if target.exists() and any(target.iterdir()):
        return PhaseOutcome.failure(
            f"{target} already exists and is not empty.",
            f"Remove {target} or choose another --install-root, then re-run.",
        )
    target.parent.mkdir(parents=True, exist_ok=True)

    clone_cmd = ["git", "clone", "--recurse-submodules"]
    if component.ref:
        clone_cmd += ["--branch", component.ref]
    clone_cmd += [component.repo, str(target)]
    result = ctx.installer.run(f"Cloning {label} into {target}", clone_cmd)
    if not result.ok:
        return PhaseOutcome.from_call(result, f"Check network access to {component.repo}.")

    if before_build is not None:
        outcome = before_build(ctx, target)
        if not outcome.ok:
            return outcome

    sdk_env = app_settings.sdk_environment()
    for build_command in component.build_commands:
        result = ctx.installer.run(
            f"Building {label}: {' '.join(build_command)}",
            build_command,
            cwd=target,
            env=sdk_env,
        )
        if not result.ok:
            return PhaseOutcome.from_call(
                result,
                f"Fix the build error above, remove {target} and re-run the installer.",
            )

    log_installer(
        f"{symbols.get('success', '✅')} {label} installed in {target}.",
        "success",
        ctx.logger,
        app_settings,
    )
    return PhaseOutcome.success(f"{label} installed in {target}.")


def _install_metalium_dependencies(ctx: PhaseContext, clone_dir: Path) -> PhaseOutcome:
    app_settings = ctx.app_settings
    url = app_settings.sdk.metalium_dependency_script_url
    script_path = make_temp_file("tt-metal-deps-", ".sh")
    try:
        result = ctx.installer.run(
            "Downloading TT-Metalium dependency script",
            ["wget", "--quiet", "-O", str(script_path), url],
        )
        if not result.ok:
            return PhaseOutcome.failure(
                f"Failed to download the TT-Metalium dependency script from {url}"
            )
        result = ctx.installer.run(
            "Installing TT-Metalium system dependencies",
            ["bash", str(script_path)],
            elevated=True,
            cwd=clone_dir,
        )
        if not result.ok:
            return PhaseOutcome.from_call(result, "Check the script output above.")
    finally:
        remove_path(script_path, app_settings, ctx.logger)
    return PhaseOutcome.success()


def install_metalium(ctx: PhaseContext) -> PhaseOutcome:
    return clone_and_build(
        ctx,
        "TT-Metalium",
        ctx.app_settings.sdk.metalium,
        before_build=_install_metalium_dependencies,
    )


def install_buda(ctx: PhaseContext) -> PhaseOutcome:
    return clone_and_build(ctx, "TT-Buda", ctx.app_settings.sdk.buda)


def install_forge(ctx: PhaseContext) -> PhaseOutcome:
    return clone_and_build(ctx, "TT-Forge", ctx.app_settings.sdk.forge)
