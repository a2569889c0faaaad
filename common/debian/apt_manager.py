# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import subprocess
from typing import List, Optional, Union

from common.command_utils import command_exists, run_command
from common.external_installer import ExternalInstaller


class AptManager:
    """
    A centralized manager for Debian apt packages using command-line tools.

    Every mutating call goes through the ExternalInstaller; only the read-only
    'dpkg-query' status checks are run directly.
    """

    def __init__(
        self,
        installer: ExternalInstaller,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the AptManager.
        Args:
            installer: The adapter used to run apt-get and dpkg.
            logger: An optional logging object.
        """
        self.installer = installer
        self.app_settings = installer.app_settings
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def update(self) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        result = self.installer.run(
            "Updating apt package lists",
            ["apt-get", "update", "-yq"],
            elevated=True,
        )
        if result.ok:
            self.logger.info("Apt package lists updated successfully.")
        return result.ok

    def is_installed(self, pkg_name: str) -> bool:
        try:
            result = run_command(
                ["dpkg-query", "-W", "-f=${db:Status-Status}", pkg_name],
                self.app_settings,
                capture_output=True,
                check=True,
                current_logger=self.logger,
            )
        except subprocess.CalledProcessError:
            return False
        return "installed" in result.stdout and "not-installed" not in result.stdout

    def install(
        self,
        packages: Union[List[str], str],
        update_first: bool = True,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install'.

        Args:
            packages: A single package name or a list of package names.
            update_first: Whether to update the package lists before installing.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            if not self.update():
                return False

        packages_to_install = []
        for pkg_name in packages:
            if self.is_installed(pkg_name):
                self.logger.info(
                    f"Package '{pkg_name}' is already installed. Skipping."
                )
            else:
                self.logger.info(
                    f"Marking package for installation: {pkg_name}"
                )
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return True

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        result = self.installer.run(
            f"Installing {', '.join(packages_to_install)}",
            ["apt-get", "install", "-yq"] + packages_to_install,
            elevated=True,
        )
        if result.ok:
            self.logger.info("Packages installed successfully.")
        return result.ok

    def install_deb(self, deb_path: str) -> bool:
        """Installs a local .deb archive with 'dpkg -i'."""
        result = self.installer.run(
            f"Installing package file {deb_path}",
            ["dpkg", "-i", deb_path],
            elevated=True,
        )
        return result.ok
