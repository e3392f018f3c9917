import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from api_power.config import CONFIG_FILE_NAME, ApiPowerConfig
from api_power.exceptions import ApiPowerError
from api_power.generator import ApiPowerGenerator

USAGE = f"""api-power - генерация TypeScript клиента по YApi, Swagger или Apifox

Команды:
  (без команды)  генерация кода по {CONFIG_FILE_NAME}
  init           создание файла конфигурации
  help           эта справка

Опции:
  -c, --config   путь к файлу конфигурации (по умолчанию {CONFIG_FILE_NAME})
  --force        перезаписать конфигурацию без подтверждения
  -v, --verbose  подробный лог
"""


def confirm_choice(message: str) -> bool:
    """Запрос подтверждения у пользователя"""
    while True:
        choice = input(f"{message} (y/n): ").lower().strip()
        if choice in ["y", "yes", "да", ""]:
            return True
        elif choice in ["n", "no", "нет"]:
            return False
        print("Введите y/n")


def init_config(config_path: str, force: bool = False) -> None:
    """Создание стартового файла конфигурации"""
    if os.path.exists(config_path) and not force:
        if not confirm_choice(f"Файл {config_path} уже существует. Перезаписать?"):
            print("⏹️ Отменено")
            return

    ApiPowerConfig.default().save_to_file(config_path)
    print(f"✅ Создан конфиг файл {config_path}")


async def _generate(config: ApiPowerConfig, cwd: str) -> List[str]:
    generator = ApiPowerGenerator(config, cwd)
    print("🧹 Очистка каталогов вывода...")
    generator.clean_output_directory()
    print("📥 Загрузка описаний интерфейсов...")
    return await generator.run()


def generate(config_path: str) -> None:
    """Генерация кода по файлу конфигурации"""
    config = ApiPowerConfig.from_file(config_path)
    cwd = os.path.dirname(os.path.abspath(config_path))

    print(f"🚀 Генерация по {config_path}")
    written = asyncio.run(_generate(config, cwd))

    print(f"💾 Записано файлов: {len(written)}")
    for path in written:
        print(f"   {os.path.relpath(path, cwd)}")
    print("✅ Генерация завершена успешно!")


def main(argv: Optional[List[str]] = None) -> None:
    """Точка входа api-power"""
    parser = argparse.ArgumentParser(
        prog="api-power",
        description="Генерация TypeScript клиента по YApi, Swagger или Apifox",
        add_help=False,
    )
    parser.add_argument("command", nargs="?", choices=["init", "help"], help="Команда")
    parser.add_argument("-c", "--config", type=str, default=CONFIG_FILE_NAME, help="Файл конфигурации")
    parser.add_argument("--force", action="store_true", help="Перезаписать без подтверждения")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный лог")
    parser.add_argument("-h", "--help", action="store_true", help="Справка")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.command == "help" or args.help:
        print(USAGE)
        return

    try:
        if args.command == "init":
            init_config(args.config, force=args.force)
        else:
            generate(args.config)
    except ApiPowerError as e:
        print(f"❌ Ошибка генерации: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
