"""
Flask主应用 - 挂载Template Engine接口
"""

import os

os.environ['PYTHONIOENCODING'] = 'utf-8'
os.environ['PYTHONUTF8'] = '1'

from flask import Flask
from loguru import logger

from TemplateEngine.flask_interface import initialize_template_engine, template_bp
from TemplateEngine.utils.config import settings


def create_app() -> Flask:
    """创建Flask应用并初始化模板引擎"""
    app = Flask(__name__)
    app.register_blueprint(template_bp, url_prefix='/api/template')
    initialize_template_engine()
    logger.info(f"模板目录: {settings.TEMPLATE_DIR}，缓存TTL: {settings.TEMPLATE_CACHE_TTL}s")
    return app


if __name__ == '__main__':
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', '5000'))
    create_app().run(host=host, port=port, debug=False, threaded=True)
