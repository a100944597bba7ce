# cli.py

"""
Запуск site2pdf из корня репозитория без установки пакета.

Пример запуска:
    python cli.py build https://developer.apple.com/documentation/virtualization --split-sections
"""
from site2pdf.cli import cli

if __name__ == "__main__":
    cli()
