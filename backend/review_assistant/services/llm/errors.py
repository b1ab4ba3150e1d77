class AIServiceError(Exception):
    """AI 服务调用失败"""
    pass


class UpstreamFormatError(AIServiceError):
    """AI 响应不是预期的结构化格式"""

    def __init__(self, message: str = "AI响应格式错误", raw: str = ""):
        super().__init__(message)
        self.raw = raw
