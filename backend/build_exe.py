import subprocess
import sys
from pathlib import Path

def build():
    backend_dir = Path(__file__).parent

    print("--- Building Trackpad Host ---")

    # PyInstaller arguments
    args = [
        "pyinstaller",
        "main.py",
        "--name=TrackpadHost",
        "--onefile",
        "--clean",
        "--noconfirm",

        # Hidden imports often missed by PyInstaller
        "--hidden-import=uvicorn",
        "--hidden-import=uvicorn.logging",
        "--hidden-import=uvicorn.loops",
        "--hidden-import=uvicorn.loops.auto",
        "--hidden-import=uvicorn.protocols",
        "--hidden-import=uvicorn.protocols.http",
        "--hidden-import=uvicorn.protocols.http.auto",
        "--hidden-import=uvicorn.lifespan",
        "--hidden-import=uvicorn.lifespan.on",
        "--hidden-import=fastapi",
        "--hidden-import=starlette",
        # Executors are imported lazily per platform
        "--hidden-import=actions.macos",
        "--hidden-import=actions.desktop",
        "--hidden-import=pynput.keyboard._win32",
        "--hidden-import=pynput.mouse._win32",
        "--hidden-import=pynput.keyboard._xorg",
        "--hidden-import=pynput.mouse._xorg",
    ]

    # Run PyInstaller
    print(f"Running: {' '.join(str(a) for a in args)}")
    result = subprocess.run(args, cwd=backend_dir)

    if result.returncode != 0:
        print("Build failed!")
        sys.exit(result.returncode)

    print("--- Build Success ---")
    dist_dir = backend_dir / "dist"
    exe_name = "TrackpadHost.exe" if sys.platform == "win32" else "TrackpadHost"
    print(f"Executable created at: {dist_dir / exe_name}")

if __name__ == "__main__":
    build()
