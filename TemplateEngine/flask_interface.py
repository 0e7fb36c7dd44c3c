"""
Template Engine Flask接口。

为报告生成流水线与运维工具提供HTTP入口：
1. 模板应用与生成报告校验；
2. 新鲜度诊断、缓存状态与手动巡检；
3. 缓存清理。
"""

import threading
from typing import Optional

from flask import Blueprint, jsonify, request
from loguru import logger

from .orchestrator import ValidationOrchestrator, create_orchestrator
from .scheduler import UpdateSweeper
from .utils.config import settings
from .utils.logging_setup import configure_logging

# 创建Blueprint
template_bp = Blueprint('template_engine', __name__)

# 全局变量
orchestrator: Optional[ValidationOrchestrator] = None
sweeper: Optional[UpdateSweeper] = None
init_lock = threading.Lock()


def initialize_template_engine(
    engine: Optional[ValidationOrchestrator] = None,
    start_sweeper: bool = True,
) -> ValidationOrchestrator:
    """
    初始化共享的编排器，并按需启动后台巡检线程。

    参数:
        engine: 预先构造好的编排器；为空时按全局配置创建。
        start_sweeper: 是否启动定时巡检。
    """
    global orchestrator, sweeper
    with init_lock:
        configure_logging()
        orchestrator = engine or create_orchestrator()
        if sweeper is not None:
            sweeper.stop(timeout=1)
            sweeper = None
        if start_sweeper:
            sweeper = UpdateSweeper(orchestrator.controller, settings.TEMPLATE_UPDATE_INTERVAL)
            sweeper.start()
        logger.info("Template Engine 初始化完成")
        return orchestrator


def _engine_or_error():
    if orchestrator is None:
        return None, (jsonify({'success': False, 'error': 'Template Engine未初始化'}), 500)
    return orchestrator, None


@template_bp.route('/templates/<template_name>/apply', methods=['POST'])
def apply_template(template_name: str):
    """加载并校验模板，请求体JSON作为用户数据"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        user_data = request.get_json(silent=True)
        if user_data is None:
            user_data = {}
        if not isinstance(user_data, dict):
            return jsonify({'success': False, 'error': '请求体必须是JSON对象'}), 400
        result = engine.apply_template(template_name, user_data)
        return jsonify(result.to_dict())
    except Exception as e:
        logger.exception(f"模板应用失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


@template_bp.route('/templates/<template_name>/validate', methods=['POST'])
def validate_report(template_name: str):
    """校验生成报告，请求体为 {"content": "..."}"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        payload = request.get_json(silent=True) or {}
        content = payload.get('content', '')
        if not isinstance(content, str):
            return jsonify({'success': False, 'error': 'content必须是字符串'}), 400
        validation = engine.validate_generated_report(content, template_name)
        return jsonify(validation.to_dict())
    except Exception as e:
        logger.exception(f"报告校验失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


@template_bp.route('/templates/freshness', methods=['GET'])
@template_bp.route('/templates/<template_name>/freshness', methods=['GET'])
def template_freshness(template_name: Optional[str] = None):
    """返回缓存新鲜度诊断"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        info = engine.freshness(template_name)
        if template_name is not None:
            return jsonify({'success': True, 'freshness': info.to_dict()})
        return jsonify({
            'success': True,
            'freshness': {name: item.to_dict() for name, item in info.items()},
        })
    except Exception as e:
        logger.exception(f"获取模板新鲜度失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


@template_bp.route('/templates/check-updates', methods=['POST'])
def check_updates():
    """立即执行一次模板更新巡检"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        statuses = engine.check_for_updates()
        return jsonify({
            'success': True,
            'updates': {name: status.to_dict() for name, status in statuses.items()},
        })
    except Exception as e:
        logger.exception(f"模板更新巡检失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


@template_bp.route('/templates/cache', methods=['DELETE'])
@template_bp.route('/templates/<template_name>/cache', methods=['DELETE'])
def clear_cache(template_name: Optional[str] = None):
    """清除单个或全部模板缓存"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        removed = engine.clear_cache(template_name)
        return jsonify({'success': True, 'removed': removed})
    except Exception as e:
        logger.exception(f"清除模板缓存失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


@template_bp.route('/templates/status', methods=['GET'])
def template_status():
    """返回缓存状态快照"""
    engine, error = _engine_or_error()
    if error:
        return error
    try:
        return jsonify({'success': True, 'status': engine.status()})
    except Exception as e:
        logger.exception(f"获取模板状态失败: {str(e)}")
        return jsonify({'success': False, 'error': str(e)}), 500


# 错误处理
@template_bp.errorhandler(404)
def not_found(error):
    """404兜底处理：保证接口统一返回JSON结构"""
    logger.warning(f"API端点不存在: {str(error)}")
    return jsonify({'success': False, 'error': 'API端点不存在'}), 404


@template_bp.errorhandler(500)
def internal_error(error):
    """500兜底处理：捕获未被主动捕获的异常"""
    logger.exception(f"服务器内部错误: {str(error)}")
    return jsonify({'success': False, 'error': '服务器内部错误'}), 500
