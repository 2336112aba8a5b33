"""
描述: 渲染适配器子包。
主要功能:
    - Markdown -> HTML 渲染
    - 聊天消息 HTML 片段视图
"""
