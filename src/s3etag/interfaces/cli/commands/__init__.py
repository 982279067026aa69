"""
CLI コマンド群。
"""
