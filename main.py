"""
main.py

명령행 진입점이며 객체 생성 및 의존성 주입(Composition Root)을 호출합니다.
"""
from __future__ import annotations

import argparse
import sys
import traceback
from typing import List, Optional

from Common.log import Log
from Function.log_cleanup import clean_old_logs
from Service.config import GradeSeparationConfig
from Service.container import build_app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove grade separation from compressed ITN GML files.")
    parser.add_argument("source_dir", help="Folder containing the *.gz GML files")
    parser.add_argument("--output-dir", required=False, help="Output folder (default: <source_dir>/out)")
    parser.add_argument("--log-dir", required=False, help="Log folder (default: ./Log next to main.py)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logger = Log(log_dir=args.log_dir)

    try:
        config = GradeSeparationConfig()
        clean_old_logs(logger.log_dir, logger, retention_days=config.log_retention_days)

        service = build_app(logger, config).grade_separation_service
        result = service.run_batch(args.source_dir, args.output_dir)

    except ValueError as e:  # pydantic ValidationError 포함
        logger.log(f"입력 값 또는 설정이 올바르지 않습니다. 중단합니다.\n{e}", level="ERROR")
        return 2

    except Exception:
        logger.log(f"실행 중 치명적 오류 발생:\n{traceback.format_exc()}", level="ERROR")
        return 1

    finally:
        logger.close()

    return 0 if result.all_succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
