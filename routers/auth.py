"""
认证路由
提供注册、登录、登出和当前会话查询接口
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import (
    AuthContext,
    CredentialsRequest,
    AuthSessionResponse,
    CurrentSessionResponse
)
from storage.database import get_session
from routers.services.auth_service import AuthService, AuthError
from utils import get_auth_context, extract_bearer_token

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/auth",
    tags=["登录认证"]
)


@router.post("/sign-up", response_model=AuthSessionResponse, summary="注册")
async def sign_up(
    request: CredentialsRequest,
    session: AsyncSession = Depends(get_session)
):
    """
    邮箱密码注册，成功后直接返回访问令牌

    认证失败的原始错误信息会返回给用户
    """
    try:
        session_data = await AuthService(session).sign_up(request.email, request.password)
        return AuthSessionResponse(success=True, message="注册成功", data=session_data)

    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"注册失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"注册失败: {str(e)}")


@router.post("/sign-in", response_model=AuthSessionResponse, summary="登录")
async def sign_in(
    request: CredentialsRequest,
    session: AsyncSession = Depends(get_session)
):
    """邮箱密码登录"""
    try:
        session_data = await AuthService(session).sign_in(request.email, request.password)
        return AuthSessionResponse(success=True, message="登录成功", data=session_data)

    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except Exception as e:
        logger.error(f"登录失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"登录失败: {str(e)}")


@router.post("/sign-out", response_model=CurrentSessionResponse, summary="登出")
async def sign_out(
    authorization: Optional[str] = Header(None, alias="Authorization")
):
    """删除当前令牌对应的会话，未登录时直接返回"""
    try:
        token = extract_bearer_token(authorization)
        if token:
            await AuthService.sign_out(token)
        return CurrentSessionResponse(success=True, message="已登出", data=None)

    except Exception as e:
        logger.error(f"登出失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"登出失败: {str(e)}")


@router.get("/session", response_model=CurrentSessionResponse, summary="当前会话")
async def current_session(
    auth_context: Optional[AuthContext] = Depends(get_auth_context)
):
    """返回当前登录用户，未登录时data为None"""
    message = "获取成功" if auth_context else "未登录"
    return CurrentSessionResponse(success=True, message=message, data=auth_context)
