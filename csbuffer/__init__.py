"""
csbuffer 패키지

셋톱박스(STB) clickstream 로그를 읽어 디바이스별 전송 버퍼를 시뮬레이션하고
초당 패키지 수, VOD 로그, 에러 로그를 생성
"""

__version__ = "0.2.0"
