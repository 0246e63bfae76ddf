# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import common.config
import fastapi
import common.db.postgres as db
import trusted_issuers_list.trusted_list as app_source


def startup() -> fastapi.FastAPI:
    config = common.config.DBConfig()
    db.create_tables(db.engine(config.SQLALCHEMY_DATABASE_URL, config.SQLALCHEMY_DATABASE_SCHEMA))
    return app_source.app


app = startup()

if __name__ == '__main__':
    import uvicorn

    server_config = common.config.ServerConfig()
    uvicorn.run(app, host=server_config.host, port=server_config.port)
