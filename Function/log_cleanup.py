"""
Function/log_cleanup.py

설정된 보관 기간이 지난 오래된 로그 파일을 자동으로 삭제하는 모듈입니다.
"""
import os
import datetime

RETENTION_DAYS = 3


def clean_old_logs(log_dir, logger, retention_days=RETENTION_DAYS):
    """
    지정된 디렉토리 내에서 보관 기간이 만료된 'Log_YYYYMMDD.log' 파일을 찾아 삭제합니다.

    Args:
        log_dir (str): 로그 파일이 저장된 디렉토리 경로
        logger (Log): 로그 기록을 위한 로거 인스턴스
        retention_days (int): 보관 기간(일)

    Returns:
        int: 삭제한 파일 수
    """
    if not os.path.exists(log_dir):
        logger.log(f"로그 디렉토리 없음: {log_dir} (정리 생략)", level="WARNING")
        return 0

    today = datetime.datetime.now().date()
    removed = 0

    for file_name in os.listdir(log_dir):
        file_path = os.path.join(log_dir, file_name)

        if not (os.path.isfile(file_path) and file_name.startswith("Log_")):
            continue

        date_part = file_name[4:12]
        if not date_part.isdigit():
            continue

        try:
            file_date = datetime.datetime.strptime(date_part, "%Y%m%d").date()
        except ValueError:
            logger.log(f"잘못된 로그 파일 형식 (삭제 스킵): {file_name}", level="WARNING")
            continue

        if (today - file_date).days <= retention_days:
            continue

        try:
            os.remove(file_path)
        except OSError as e:
            logger.log(f"로그 파일 삭제 실패: {file_name} - {e}", level="WARNING")
            continue

        removed += 1
        logger.log(f"오래된 로그 파일 삭제: {file_name}", level="INFO")

    return removed
