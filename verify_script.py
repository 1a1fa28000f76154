import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from tale_framework.content.loader import inspect_script, load_script
from tale_framework.errors import ScriptInvalid


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("ScriptVerification")

    if len(sys.argv) != 2:
        logger.error("Usage: python verify_script.py <script.json>")
        sys.exit(2)

    path = Path(sys.argv[1])
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"VERIFICATION FAILED: cannot read {path}: {e}")
        sys.exit(1)

    try:
        script = load_script(raw)
    except ScriptInvalid as e:
        logger.error(f"VERIFICATION FAILED: {e.message}")
        sys.exit(1)

    scene_count = sum(len(stage.scenes) for stage in script.stages)
    logger.info(
        f"Loaded '{script.world_settings.title}': "
        f"{len(script.stages)} stages, {scene_count} scenes."
    )

    warnings = inspect_script(script)
    if warnings:
        logger.error(f"VERIFICATION FAILED: {len(warnings)} dangling reference(s).")
        sys.exit(1)

    logger.info("VERIFICATION SUCCESSFUL: script is consistent.")


if __name__ == "__main__":
    main()
