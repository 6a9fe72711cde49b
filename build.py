#!/usr/bin/env python3
"""Build script for SerialTerm - creates executables for different platforms."""

import platform
import shutil
import subprocess
import sys
from pathlib import Path

# Import version from the package
sys.path.insert(0, str(Path(__file__).parent))
from serialterm.version import __version__, APP_NAME, AUTHOR, DESCRIPTION, LICENSE

VERSION = __version__
ENTRY_POINT = "serialterm/main.py"

ROOT = Path(__file__).parent
DIST_DIR = ROOT / "dist"
BUILD_DIR = ROOT / "build"


def clean():
    """Clean build artifacts."""
    print("[CLEAN] Cleaning build artifacts...")
    for d in [DIST_DIR, BUILD_DIR, ROOT / f"{APP_NAME}.spec"]:
        if d.exists():
            if d.is_dir():
                shutil.rmtree(d)
            else:
                d.unlink()
    print("   Done!")


def build_pyinstaller():
    """Build a single-file executable with PyInstaller."""
    print(f"[BUILD] Building {APP_NAME} with PyInstaller...")

    cmd = [
        sys.executable, "-m", "PyInstaller",
        "--name", APP_NAME,
        "--onefile",
        "--windowed",
        "--clean",
        "--paths", str(ROOT),
        "--hidden-import", "PySide6.QtCore",
        "--hidden-import", "PySide6.QtGui",
        "--hidden-import", "PySide6.QtWidgets",
        "--hidden-import", "serial",
        "--hidden-import", "serial.tools.list_ports",
        "--exclude-module", "tkinter",
        "--exclude-module", "IPython",
        "--exclude-module", "numpy",
        ENTRY_POINT,
    ]
    subprocess.run(cmd, check=True)

    exe_path = DIST_DIR / APP_NAME
    if sys.platform == "win32":
        exe_path = exe_path.with_suffix(".exe")

    if exe_path.exists():
        size_mb = exe_path.stat().st_size / (1024 * 1024)
        print(f"[OK] Built: {exe_path} ({size_mb:.1f} MB)")
    else:
        print("[ERROR] Build failed!")
        sys.exit(1)


def get_architecture():
    """Map the machine name onto a Debian architecture."""
    machine = platform.machine().lower()
    if machine in ('x86_64', 'amd64'):
        return 'amd64'
    if machine in ('aarch64', 'arm64'):
        return 'arm64'
    if machine.startswith('arm'):
        return 'armhf'
    return machine


def create_deb_structure():
    """Package the built executable as a .deb."""
    print(f"[BUILD] Creating .deb package for {APP_NAME}...")

    exe_path = DIST_DIR / APP_NAME
    if not exe_path.exists():
        print("[ERROR] Executable not found. Run build first!")
        sys.exit(1)

    name = APP_NAME.lower()
    arch = get_architecture()
    deb_name = f"{name}_{VERSION}_{arch}"
    deb_dir = DIST_DIR / deb_name

    (deb_dir / "DEBIAN").mkdir(parents=True, exist_ok=True)
    (deb_dir / "usr" / "bin").mkdir(parents=True, exist_ok=True)
    (deb_dir / "usr" / "share" / "applications").mkdir(parents=True, exist_ok=True)

    shutil.copy(exe_path, deb_dir / "usr" / "bin" / name)
    (deb_dir / "usr" / "bin" / name).chmod(0o755)

    (deb_dir / "DEBIAN" / "control").write_text(f"""Package: {name}
Version: {VERSION}
Section: comm
Priority: optional
Architecture: {arch}
Maintainer: {AUTHOR}
Depends: libxcb-cursor0
Description: {DESCRIPTION}
 SerialTerm opens a serial port, shows received bytes as text or hex
 and sends typed text or hex back to the device. License: {LICENSE}.
""")

    (deb_dir / "usr" / "share" / "applications" / f"{name}.desktop").write_text(f"""[Desktop Entry]
Name={APP_NAME}
Comment={DESCRIPTION}
Exec=/usr/bin/{name}
Terminal=false
Type=Application
Categories=Utility;Development;
Keywords=serial;uart;terminal;
""")

    deb_file = DIST_DIR / f"{deb_name}.deb"
    subprocess.run(["dpkg-deb", "--build", str(deb_dir), str(deb_file)], check=True)
    shutil.rmtree(deb_dir)
    print(f"[OK] Built: {deb_file}")


def main():
    import argparse

    parser = argparse.ArgumentParser(description=f"Build {APP_NAME}")
    parser.add_argument("command", choices=["clean", "exe", "deb", "all"],
                        help="Build command")
    args = parser.parse_args()

    if args.command == "clean":
        clean()
    elif args.command == "exe":
        build_pyinstaller()
    elif args.command == "deb":
        create_deb_structure()
    elif args.command == "all":
        clean()
        build_pyinstaller()
        if sys.platform == "linux":
            create_deb_structure()
        print("\n[DONE] Build complete!")


if __name__ == "__main__":
    main()
