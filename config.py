import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
SESSION_TTL = int(os.getenv("SESSION_TTL", "10800"))  # 3시간 (시험 2시간 + 여유)
# 서버 기동 후 앱 창으로 브라우저 열기 (단일 PC 응시용). 다중 응시 서버에서는 끔
OPEN_BROWSER = os.getenv("OPEN_BROWSER", "0") == "1"

# 시험 설정
EXAM_NAME = os.getenv("EXAM_NAME", "Coding Round")
EXAM_DURATION_SECONDS = int(os.getenv("EXAM_DURATION_SECONDS", str(2 * 60 * 60)))
TIMER_INTERVAL_SECONDS = 1.0
AUTOSAVE_DELAY_SECONDS = float(os.getenv("AUTOSAVE_DELAY_SECONDS", "2.0"))
# 제출 완료 후 이동할 결과 화면. {email} 은 응시자 이메일로 치환
RESULTS_URL = os.getenv("RESULTS_URL", "/api/user/results?email={email}")

# 문제 소스: http(s) URL 또는 로컬 JSON 파일 경로
QUESTION_SOURCE = os.getenv("QUESTION_SOURCE", os.path.join(STATIC_DIR, "all_questions.json"))
# 비어 있으면 앱 내부의 /api/test-results 로 in-process 제출
SUBMISSION_ENDPOINT = os.getenv("SUBMISSION_ENDPOINT", "")

# MongoDB 설정
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "onlineexam")
REGISTRATION_COLLECTION = "registrations"
TEST_RESULTS_COLLECTION = "testresults"
ADMIN_COLLECTION = "admin"

# 초기 관리자 계정 (둘 다 설정된 경우에만 시드)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
