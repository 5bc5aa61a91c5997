"""
Limpieza one-shot de parametros `tag`/`tagging` en URLs persistidas.

Tablas afectadas:
- bulk.archive_file (ademas se normaliza al prefijo S3 canonico)
- partner.meta -> partner_pos_attach_files[]
- client.* attachment URLs (solo URLs firmadas por Hydra)
"""

__version__ = "1.0.0"
