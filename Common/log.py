import logging
import datetime
import os

from Function.utils import get_runtime_base_path

LOGGER_NAME = "itn_preloader"


class Log:
    def __init__(self, log_dir=None, console=True):
        # 지정하지 않으면 프로그램 실행 폴더 하위 'Log' 폴더 사용
        if log_dir is None:
            log_dir = os.path.join(get_runtime_base_path(), "Log")

        self.log_dir = os.path.abspath(log_dir)
        os.makedirs(self.log_dir, exist_ok=True)

        # 로그 파일 경로 (파일명은 'Log_YYYYMMDD.log' 형식)
        self.log_file = os.path.join(self.log_dir, f'Log_{self._current_date_str()}.log')
        self._console = console

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._attach_file_handler()

    def _attach_file_handler(self):
        # 같은 파일에 대한 핸들러가 이미 있으면 다시 붙이지 않음
        for handler in self._logger.handlers:
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == self.log_file:
                return

        handler = logging.FileHandler(self.log_file, encoding='utf-8')
        handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%Y/%m/%d %H:%M'))
        self._logger.addHandler(handler)

    def _current_date_str(self):
        return datetime.datetime.now().strftime("%Y%m%d")

    def log(self, msg, level='DEBUG'):
        """지정된 로그 레벨로 메시지를 기록하고 콘솔에도 출력합니다."""
        level = level.upper()
        numeric_level = logging.getLevelName(level)
        if not isinstance(numeric_level, int):
            print(f"알 수 없는 로그 레벨: {level}")
            return

        self._logger.log(numeric_level, msg)

        if self._console:
            print(f"{level}: {msg}")

    def close(self):
        """이 인스턴스가 연 파일 핸들러를 닫고 분리합니다."""
        for handler in list(self._logger.handlers):
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == self.log_file:
                handler.close()
                self._logger.removeHandler(handler)

    def get_log_paths(self):
        """현재 로그 파일 경로를 반환하는 메서드."""
        return self.log_file
