# tt_installer/config.py
# -*- coding: utf-8 -*-
"""
Centralized static constants and definitions for the Tenstorrent stack installer.

This module defines truly static values: component versions, the literal
download URLs derived from them, default package lists and logging symbols.

Runtime configuration (install root, architecture, which optional phases to
offer) is handled by 'tt_installer/config_models.py' and
'tt_installer/config_loader.py'.
"""

from pathlib import Path

SCRIPT_VERSION: str = "1.0"

LOG_PREFIX_DEFAULT: str = "[TT-STACK]"

SYMBOLS: dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "skip": "⏭️",
    "reboot": "🔁",
}

# --- Distribution ---
SUPPORTED_DISTRIBUTION: str = "Ubuntu"
SUPPORTED_VERSIONS: list[str] = ["22.04"]
LSB_RELEASE_PATH: Path = Path("/etc/lsb-release")
OS_RELEASE_PATH: Path = Path("/etc/os-release")

PREREQUISITE_PACKAGES: list[str] = [
    "wget",
    "git",
    "python3-pip",
    "dkms",
    "cargo",
]

REQUIRED_TOOLS: list[str] = ["wget", "git", "python3", "pip3", "cargo"]

# --- TT-KMD ---
TT_KMD_VERSION: str = "1.31"
TT_KMD_REPO: str = "https://github.com/tenstorrent/tt-kmd.git"
TT_KMD_MODULE_NAME: str = "tenstorrent"

# --- TT-Flash and firmware ---
TT_FLASH_REPO: str = "https://github.com/tenstorrent/tt-flash.git"
TT_FIRMWARE_VERSION: str = "fw_pack-80.15.0.0.fwbundle"
TT_FIRMWARE_BASE_URL: str = "https://github.com/tenstorrent/tt-firmware/raw/main"

# --- TT-System-Tools (HugePages) ---
TT_SYSTEM_TOOLS_VERSION: str = "1.1"
TT_SYSTEM_TOOLS_DEB_FILENAME: str = "tenstorrent-tools_1.1-5_all.deb"
TT_SYSTEM_TOOLS_BASE_URL: str = (
    "https://github.com/tenstorrent/tt-system-tools/releases/download"
)
HUGEPAGES_SERVICE: str = "tenstorrent-hugepages.service"
HUGEPAGES_MOUNT_UNIT: str = "dev-hugepages\\x2d1G.mount"

# --- Management tools ---
TT_TOPOLOGY_REPO: str = "https://github.com/tenstorrent/tt-topology"
TT_SMI_REPO: str = "https://github.com/tenstorrent/tt-smi"
TT_SMI_VERIFY_COMMAND: list[str] = ["tt-smi", "-s"]

# --- SDKs ---
ARCH_NAMES: tuple[str, ...] = ("grayskull", "wormhole_b0", "blackhole")
ARCH_NAME_DEFAULT: str = "wormhole_b0"
INSTALL_DIR_NAME_DEFAULT: str = "tenstorrent"

TT_METALIUM_REPO: str = "https://github.com/tenstorrent/tt-metal.git"
TT_METALIUM_DIR_NAME: str = "tt-metal"
TT_METALIUM_DEPENDENCY_SCRIPT_URL: str = (
    "https://raw.githubusercontent.com/tenstorrent/tt-metal/main/install_dependencies.sh"
)
TT_METALIUM_BUILD_COMMANDS: list[list[str]] = [
    ["./build_metal.sh"],
    ["./create_venv.sh"],
]

TT_BUDA_REPO: str = "https://github.com/tenstorrent/tt-buda.git"
TT_BUDA_DIR_NAME: str = "tt-buda"
TT_BUDA_BUILD_COMMANDS: list[list[str]] = [
    ["bash", "-c", "source env_for_silicon.sh && make"],
]

TT_FORGE_REPO: str = "https://github.com/tenstorrent/tt-forge-fe.git"
TT_FORGE_DIR_NAME: str = "tt-forge-fe"
TT_FORGE_BUILD_COMMANDS: list[list[str]] = [
    ["cmake", "-G", "Ninja", "-B", "build"],
    ["cmake", "--build", "build"],
]

PROFILING_PACKAGES: list[str] = [
    "libtbb-dev",
    "libcapstone-dev",
    "pkg-config",
    "cmake",
    "ninja-build",
]

POST_INSTALL_NOTES: list[str] = [
    "1. A system reboot is STRONGLY RECOMMENDED to:",
    "   - Apply updated device firmware (if flashed).",
    "   - Ensure the kernel module (TT-KMD) is loaded correctly at boot.",
    "   - Ensure HugePages services and mounts are active.",
    "   Please run: sudo reboot",
    "2. After rebooting, verify the installation again by running: sudo tt-smi",
    "3. Check that the BIOS setting 'PCIe AER Reporting Mechanism' is set to "
    "'OS First' if using TT-QuietBox or experiencing related issues.",
]
