# campus_hub/models/community.py
from dataclasses import dataclass
from typing import Optional, List

@dataclass(frozen=True)
class Community:
    """교내 커뮤니티. 목록은 고정되어 있으며 DB에 저장하지 않습니다."""
    community_id: str
    name: str
    description: str

ALL_COMMUNITIES_ID = 'all'

COMMUNITIES: List[Community] = [
    Community(ALL_COMMUNITIES_ID, 'All Communities', 'Browse content from all tech communities at VIT.'),
    Community('gdg', 'Google Developer Groups (GDG)', 'Explore events, discussions, and resources from the GDG chapter, focusing on Google technologies and web development.'),
    Community('acm', 'ACM Chapter', 'Engage with the Association for Computing Machinery (ACM) chapter for content on computer science, algorithms, and competitive programming.'),
    Community('cultural-club', 'cult club', 'Dive into Artificial Intelligence and Machine Learning with the AI Club. Find workshops, projects, and discussions.'),
    Community('ieee', 'IEEE Org', 'Get hands-on with Grss, AESS, and automation projects with the IEEE Org.'),
    Community('general-tech', 'General Tech Talks', 'A place for general technology discussions, news, and miscellaneous tech topics.'),
]

def get_community(community_id: str) -> Optional[Community]:
    return next((c for c in COMMUNITIES if c.community_id == community_id), None)

def is_postable_community(community_id: str) -> bool:
    """'all' 은 목록 필터 전용이므로 글을 작성할 수 없습니다."""
    return community_id != ALL_COMMUNITIES_ID and get_community(community_id) is not None
