"""
多租户附件浏览计数子系统
"""
__version__ = "1.0.0"
