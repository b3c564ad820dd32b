from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.env import PATHS

PACMAN_PACKAGES = [
    "git", "base-devel", "curl", "jq", "unzip", "tar", "unrar", "fzf", "linux-headers",
    "nvidia-open-dkms", "nvidia-utils", "lib32-nvidia-utils", "vulkan-icd-loader",
    "lib32-vulkan-icd-loader", "nvidia-settings", "xdg-desktop-portal", "flatpak",
    "powerdevil", "tuned", "tuned-ppd", "vim", "wget", "htop", "firefox",
    "libreoffice-fresh", "vlc", "spotify-launcher", "telegram-desktop", "python",
    "python-pip", "ffmpegthumbs", "kdegraphics-thumbnailers", "liquidctl", "gwenview",
    "qbittorrent", "pacman-contrib", "proton-vpn-gtk-app", "torbrowser-launcher",
    "kalk", "filelight", "kvantum", "papirus-icon-theme", "lutris", "umu-launcher", "steam",
    "ttf-liberation", "gamemode", "goverlay", "mangohud", "noto-fonts", "noto-fonts-extra",
    "noto-fonts-cjk", "noto-fonts-emoji", "discord", "kitty", "zsh", "zsh-completions",
    "zsh-autosuggestions", "zsh-syntax-highlighting", "pkgfile", "shellcheck", "elisa",
]

AUR_PACKAGES = [
    "visual-studio-code-bin", "savedesktop", "gwe", "webapp-manager", "zapzap",
    "protonplus", "zsh-theme-powerlevel10k-git",
]

WINE_PACKAGES = ["wine-staging", "winetricks", "wine-mono"]

WINE_DEPENDENCIES = [
    "giflib", "lib32-giflib", "gnutls", "lib32-gnutls", "v4l-utils", "lib32-v4l-utils",
    "libpulse", "lib32-libpulse", "alsa-plugins", "lib32-alsa-plugins",
    "alsa-lib", "lib32-alsa-lib", "sqlite", "lib32-sqlite", "libxcomposite",
    "lib32-libxcomposite", "ocl-icd", "lib32-ocl-icd", "libva", "lib32-libva",
    "gtk3", "lib32-gtk3", "gst-plugins-base-libs", "lib32-gst-plugins-base-libs",
    "vulkan-icd-loader", "lib32-vulkan-icd-loader", "sdl2-compat", "lib32-sdl2-compat",
]

VIRTUALIZATION_PACKAGES = [
    "qemu-full", "qemu-img", "libvirt", "virt-install", "virt-manager", "virt-viewer",
    "edk2-ovmf", "dnsmasq", "swtpm", "guestfs-tools", "libosinfo",
]

DNIE_PACKAGES = ["opensc", "pcsc-tools", "ccid"]
DNIE_AUR_PACKAGES = ["libpkcs11-dnie"]


@dataclass(frozen=True)
class SetupConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    def _packages(self, key: str, default: List[str]) -> List[str]:
        value = self._section("packages").get(key)
        return list(default if value is None else value)

    @property
    def progress_file(self) -> str:
        return str(((self.raw.get("paths") or {}).get("progress_file")) or PATHS.progress_default)

    @property
    def log_file(self) -> str:
        return str(((self.raw.get("paths") or {}).get("log_file")) or PATHS.log_default)

    @property
    def boot_entries_dir(self) -> str:
        return str(((self.raw.get("paths") or {}).get("boot_entries_dir")) or "/boot/loader/entries")

    @property
    def pacman_packages(self) -> List[str]:
        return self._packages("pacman", PACMAN_PACKAGES)

    @property
    def aur_packages(self) -> List[str]:
        return self._packages("aur", AUR_PACKAGES)

    @property
    def wine_packages(self) -> List[str]:
        return self._packages("wine", WINE_PACKAGES)

    @property
    def wine_dependencies(self) -> List[str]:
        return self._packages("wine_dependencies", WINE_DEPENDENCIES)

    @property
    def virtualization_packages(self) -> List[str]:
        return self._packages("virtualization", VIRTUALIZATION_PACKAGES)

    @property
    def dnie_packages(self) -> List[str]:
        return self._packages("dnie", DNIE_PACKAGES)

    @property
    def dnie_aur_packages(self) -> List[str]:
        return self._packages("dnie_aur", DNIE_AUR_PACKAGES)

    @property
    def yay_repo(self) -> str:
        return str(self._section("sources").get("yay") or "https://aur.archlinux.org/yay-bin.git")

    @property
    def kde_theme_repo(self) -> str:
        return str(
            self._section("sources").get("kde_theme") or "https://github.com/vinceliuice/WhiteSur-kde.git"
        )

    @property
    def cursor_theme_repo(self) -> str:
        return str(
            self._section("sources").get("cursor_theme")
            or "https://github.com/vinceliuice/WhiteSur-cursors.git"
        )

    @property
    def ohmyzsh_installer_url(self) -> str:
        return str(
            self._section("sources").get("ohmyzsh")
            or "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
        )

    @property
    def tuned_profile(self) -> str:
        return str(self._section("tuning").get("tuned_profile") or "balanced")

    @property
    def wifi_scan_wait_s(self) -> float:
        return float(self._section("timing").get("wifi_scan_wait_s", 3))

    @property
    def wifi_powersave_wait_s(self) -> float:
        return float(self._section("timing").get("wifi_powersave_wait_s", 15))

    @property
    def bluetooth_scan_s(self) -> int:
        return int(self._section("timing").get("bluetooth_scan_s", 10))


def load_setup_config(path: Optional[str]) -> SetupConfig:
    """Load a YAML config; with no path the built-in defaults apply."""

    if path is None:
        return SetupConfig()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("setup config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the setup config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("setup config must contain a mapping/object")

    return SetupConfig(raw=raw)
