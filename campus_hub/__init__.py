# campus_hub/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from campus_hub.core.config import config_by_name
from campus_hub.core.exceptions import NotFoundError, ForbiddenError, PersistenceError

# - API 블루프린트
from campus_hub.api.auth.routes import auth_bp
from campus_hub.api.users.routes import users_bp
from campus_hub.api.questions.routes import questions_bp
from campus_hub.api.comments.routes import comments_bp
from campus_hub.api.votes.routes import votes_bp
from campus_hub.api.events.routes import events_bp
from campus_hub.api.search.routes import search_bp
from campus_hub.api.communities.routes import communities_bp

# - 서비스 모듈
from campus_hub.api.auth.services import AuthService
from campus_hub.api.users.services import UserService
from campus_hub.api.votes.services import VoteService
from campus_hub.api.questions.services import QuestionService
from campus_hub.api.comments.services import CommentService
from campus_hub.api.events.services import EventService
from campus_hub.api.search.services import SearchService

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.
    - db 를 전달하면 Firebase 초기화를 건너뛰고 해당 클라이언트를 사용합니다 (테스트용).
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 서비스 먼저 생성
    app.services['users'] = UserService(db=db)
    app.services['votes'] = VoteService(db=db)
    app.services['auth'] = AuthService(
        user_service=app.services['users'],
        allowed_email_domain=app.config['ALLOWED_EMAIL_DOMAIN'],
        db=db
    )

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['questions'] = QuestionService(vote_service=app.services['votes'], db=db)
    app.services['comments'] = CommentService(
        question_service=app.services['questions'],
        vote_service=app.services['votes'],
        db=db
    )
    app.services['events'] = EventService(db=db)
    app.services['search'] = SearchService(
        question_service=app.services['questions'],
        event_service=app.services['events']
    )

    # 로그아웃한 토큰은 revoked_tokens 컬렉션으로 확인합니다.
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(questions_bp, url_prefix='/api/questions')
    app.register_blueprint(comments_bp, url_prefix='/api')
    app.register_blueprint(votes_bp, url_prefix='/api')
    app.register_blueprint(events_bp, url_prefix='/api/events')
    app.register_blueprint(search_bp, url_prefix='/api/search')
    app.register_blueprint(communities_bp, url_prefix='/api/communities')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(err):
        return jsonify({"error_code": err.code, "message": err.message}), 404

    @app.errorhandler(ForbiddenError)
    def handle_forbidden(err):
        return jsonify({"error_code": err.code, "message": err.message}), 403

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(err):
        # 원인 예외는 store_errors 에서 이미 로깅되었습니다.
        return jsonify({"error_code": err.code, "message": err.message}), 503

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404/405 등 Werkzeug HTTP 예외는 그대로 돌려줍니다.
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
