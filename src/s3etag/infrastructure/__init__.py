"""
インフラストラクチャ層の公開API。
"""
