"""
外部インターフェース層。
"""
