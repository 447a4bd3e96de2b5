"""
공부 일정 관리 백엔드
"""
