# scripts/make_admin.py
"""
최초 관리자 계정을 지정하는 스크립트입니다.
사용자는 먼저 한 번 로그인해서 프로필이 만들어져 있어야 합니다.

사용법: python scripts/make_admin.py someone@vit.edu.in
"""
import os
import sys

# 프로젝트 루트를 import 경로에 추가합니다.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campus_hub import create_app
from campus_hub.core.permissions import Role

def make_admin(email: str) -> int:
    app = create_app()
    user_service = app.services['users']

    user = user_service.search_user_by_email(email)
    if user is None:
        print(f"'{email}' 사용자를 찾을 수 없습니다. 먼저 로그인해서 프로필을 만들어 주세요.")
        return 1

    # role 만 변경합니다. 권한 목록은 역할로부터 계산됩니다.
    updated = user_service.update_role(user.uid, Role.ADMIN.value)
    print(f"{updated.email} ({updated.uid}) 의 역할을 '{updated.role}' 로 변경했습니다.")
    print(f"권한: {', '.join(updated.permissions)}")
    return 0

if __name__ == '__main__':
    if len(sys.argv) != 2:
        print("사용법: python scripts/make_admin.py <email>")
        sys.exit(2)
    sys.exit(make_admin(sys.argv[1]))
