import time
from datetime import datetime, timezone

from positbench.cli import main


if __name__ == "__main__":
    start_wall = datetime.now(timezone.utc)
    start_cpu = time.perf_counter()
    print(f"[START] {start_wall.isoformat()}")
    try:
        rc = main()
    finally:
        end_wall = datetime.now(timezone.utc)
        elapsed_sec = time.perf_counter() - start_cpu
        print(f"[END]   {end_wall.isoformat()}  (elapsed: {elapsed_sec:.3f}s)")
    raise SystemExit(rc)
