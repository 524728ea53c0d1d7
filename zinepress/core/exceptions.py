# -*- coding: utf-8 -*-
# core/exceptions.py
class ZineExportError(Exception):
    """Базовое исключение движка экспорта"""
    pass


class UnknownFormatError(ZineExportError):
    """Для формата шаблона не определено правило импозиции"""

    def __init__(self, zine_format):
        self.format = zine_format
        super().__init__(f"Неизвестный формат зина: {zine_format!r}")


class MissingTemplateError(ZineExportError):
    """Шаблон проекта не найден у поставщика шаблонов"""

    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Шаблон не найден: {template_id!r}")


class AssetNotFoundError(ZineExportError):
    """Поставщик ассетов не вернул изображение"""

    def __init__(self, asset_id):
        self.asset_id = asset_id
        super().__init__(f"Ассет не найден: {asset_id!r}")


class AssetLoadFailedError(ZineExportError):
    """Изображение не удалось загрузить или декодировать"""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        message = f"Не удалось загрузить изображение: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ExportOptionsError(ZineExportError):
    """Некорректные параметры экспорта"""
    pass


class DocumentAssemblyError(ZineExportError):
    """Ошибка сборки PDF документа"""
    pass


class ProjectFormatError(ZineExportError):
    """Ошибка чтения сохраненного документа проекта"""
    pass
