import sys
import traceback

from warp_kitten.cli import main
from warp_kitten.log import log

# Start the game
if __name__ == "__main__":
    try:
        log("__main__ entry reached. Starting warp-kitten...")
        sys.exit(main())
    except Exception as e:
        log(f"Unhandled exception: {e}")
        log(traceback.format_exc())
        sys.exit(1)
