"""
ドメイン層の公開API。
"""
