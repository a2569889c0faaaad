# tt_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions. Every model is frozen: the
settings object is built once at startup and passed explicitly to every
component.
"""

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tt_installer import config

SYMBOLS_DEFAULT: Dict[str, str] = dict(config.SYMBOLS)

ArchName = Literal["grayskull", "wormhole_b0", "blackhole"]


class KmdSettings(BaseSettings):
    """TT-KMD kernel driver settings."""
    model_config = SettingsConfigDict(env_prefix="TT_KMD_", extra="ignore", frozen=True)

    version: str = Field(default=config.TT_KMD_VERSION, description="DKMS module version passed to 'dkms install'.")
    repo: str = Field(default=config.TT_KMD_REPO, description="Git URL of the TT-KMD sources.")
    module_name: str = Field(default=config.TT_KMD_MODULE_NAME, description="Module name from dkms.conf, used by dkms and modprobe.")


class FirmwareSettings(BaseSettings):
    """TT-Flash utility and firmware bundle settings."""
    model_config = SettingsConfigDict(env_prefix="TT_FIRMWARE_", extra="ignore", frozen=True)

    flash_repo: str = Field(default=config.TT_FLASH_REPO, description="Git URL of the TT-Flash utility.")
    version: str = Field(default=config.TT_FIRMWARE_VERSION, description="Firmware bundle file name.")
    base_url: str = Field(default=config.TT_FIRMWARE_BASE_URL, description="Base URL the firmware bundle is fetched from.")
    force: bool = Field(default=False, description="Pass '--force' to tt-flash (allows flashing older firmware).")

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.version}"


class SystemToolsSettings(BaseSettings):
    """tenstorrent-tools package (HugePages) settings."""
    model_config = SettingsConfigDict(env_prefix="TT_SYSTEM_TOOLS_", extra="ignore", frozen=True)

    version: str = Field(default=config.TT_SYSTEM_TOOLS_VERSION, description="Release of TT-System-Tools.")
    deb_filename: str = Field(default=config.TT_SYSTEM_TOOLS_DEB_FILENAME, description="Name of the released .deb asset.")
    base_url: str = Field(default=config.TT_SYSTEM_TOOLS_BASE_URL, description="GitHub releases download base URL.")
    hugepages_service: str = Field(default=config.HUGEPAGES_SERVICE, description="systemd service configuring HugePages.")
    hugepages_mount: str = Field(default=config.HUGEPAGES_MOUNT_UNIT, description="systemd mount unit for 1G HugePages.")

    @property
    def deb_url(self) -> str:
        # The release tag is 'upstream/<version>', URL-encoded.
        return f"{self.base_url.rstrip('/')}/upstream%2F{self.version}/{self.deb_filename}"


class ManagementToolsSettings(BaseSettings):
    """TT-SMI and TT-Topology settings."""
    model_config = SettingsConfigDict(env_prefix="TT_TOOLS_", extra="ignore", frozen=True)

    smi_repo: str = Field(default=config.TT_SMI_REPO, description="Git URL of TT-SMI.")
    topology_repo: str = Field(default=config.TT_TOPOLOGY_REPO, description="Git URL of TT-Topology.")
    offer_topology: bool = Field(default=True, description="Offer the optional TT-Topology phase.")
    verify_command: List[str] = Field(default_factory=lambda: list(config.TT_SMI_VERIFY_COMMAND),
                                      description="Command run (elevated) to confirm the devices are visible.")


class SdkComponentSettings(BaseModel):
    """A single SDK repository that is cloned and built under the install root."""
    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Offer this SDK phase. Disabled phases are reported as skipped.")
    repo: str = Field(description="Git URL of the SDK.")
    dir_name: str = Field(description="Directory name under the install root.")
    ref: Optional[str] = Field(default=None, description="Branch or tag to clone. Default branch when unset.")
    build_commands: List[List[str]] = Field(default_factory=list,
                                            description="Commands run inside the clone, in order.")


class SdkSettings(BaseSettings):
    """Optional SDK phases."""
    model_config = SettingsConfigDict(env_prefix="TT_SDK_", extra="ignore", frozen=True)

    metalium: SdkComponentSettings = Field(default_factory=lambda: SdkComponentSettings(
        repo=config.TT_METALIUM_REPO,
        dir_name=config.TT_METALIUM_DIR_NAME,
        build_commands=[list(c) for c in config.TT_METALIUM_BUILD_COMMANDS],
    ))
    metalium_dependency_script_url: str = Field(
        default=config.TT_METALIUM_DEPENDENCY_SCRIPT_URL,
        description="Dependency-bootstrap script fetched and run before building TT-Metalium.",
    )
    buda: SdkComponentSettings = Field(default_factory=lambda: SdkComponentSettings(
        repo=config.TT_BUDA_REPO,
        dir_name=config.TT_BUDA_DIR_NAME,
        build_commands=[list(c) for c in config.TT_BUDA_BUILD_COMMANDS],
    ))
    forge: SdkComponentSettings = Field(default_factory=lambda: SdkComponentSettings(
        repo=config.TT_FORGE_REPO,
        dir_name=config.TT_FORGE_DIR_NAME,
        build_commands=[list(c) for c in config.TT_FORGE_BUILD_COMMANDS],
    ))
    offer_profiling_deps: bool = Field(default=True, description="Offer the optional profiling dependencies phase.")
    profiling_packages: List[str] = Field(default_factory=lambda: list(config.PROFILING_PACKAGES))


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    log_prefix: str = Field(default=config.LOG_PREFIX_DEFAULT, description="Prefix for log messages from the installer.")
    install_root: Path = Field(default_factory=lambda: Path.home() / config.INSTALL_DIR_NAME_DEFAULT,
                               description="Directory the SDK repositories are cloned into.")
    arch_name: ArchName = Field(default=config.ARCH_NAME_DEFAULT, description="Accelerator architecture exported as ARCH_NAME.")
    assume_yes: bool = Field(default=False, description="Answer 'yes' to every confirmation gate. Reboot checkpoints still block.")
    skip_prerequisites: bool = Field(default=False, description="Do not install prerequisite packages; require the tools up front.")

    supported_distribution: str = Field(default=config.SUPPORTED_DISTRIBUTION)
    supported_versions: List[str] = Field(default_factory=lambda: list(config.SUPPORTED_VERSIONS))
    prerequisite_packages: List[str] = Field(default_factory=lambda: list(config.PREREQUISITE_PACKAGES))
    required_tools: List[str] = Field(default_factory=lambda: list(config.REQUIRED_TOOLS))

    kmd: KmdSettings = Field(default_factory=KmdSettings)
    firmware: FirmwareSettings = Field(default_factory=FirmwareSettings)
    system_tools: SystemToolsSettings = Field(default_factory=SystemToolsSettings)
    tools: ManagementToolsSettings = Field(default_factory=ManagementToolsSettings)
    sdk: SdkSettings = Field(default_factory=SdkSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("install_root")
    @classmethod
    def expand_install_root(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def tt_metal_home(self) -> Path:
        return self.install_root / self.sdk.metalium.dir_name

    def sdk_environment(self) -> Dict[str, str]:
        """Environment variables consumed by the SDK build scripts after install."""
        return {
            "TT_METAL_HOME": str(self.tt_metal_home),
            "ARCH_NAME": self.arch_name,
            "PYTHONPATH": str(self.tt_metal_home),
        }
