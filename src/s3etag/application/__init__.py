"""
アプリケーション層の公開API。
"""
