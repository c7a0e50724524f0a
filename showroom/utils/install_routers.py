import importlib
import logging
import os

from fastapi import FastAPI

logger = logging.getLogger(__name__)

ROUTERS_PACKAGE = 'showroom.routers'
ROUTERS_FOLDER = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'routers')


def install_routers(fastapi_app: FastAPI):
    # list python files in the routers folder, skipping __init__.py
    files = sorted(filter(lambda x: x[-3:] == '.py' and x != '__init__.py', os.listdir(ROUTERS_FOLDER)))
    # import each router module and mount its router
    for file in files:
        module_name = f'{ROUTERS_PACKAGE}.{file[:-3]}'
        module = importlib.import_module(module_name)
        fastapi_app.include_router(module.router)
        logger.debug(f'Router {module_name} included')
