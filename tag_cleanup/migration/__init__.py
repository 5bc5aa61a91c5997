"""
Pipeline de limpieza: remover `tag`/`tagging` de URLs persistidas.

Este paquete esta disenado para ejecutarse como job one-shot, no como
parte de un servicio.

Objetivos de diseno:
- Idempotencia: se puede ejecutar N veces; una URL ya limpia no cambia.
- Paginacion por keyset (id > cursor), secuencial, sin estado persistido.
- Una fila = un UPDATE; el fallo de una fila no aborta el batch.
- Dry-run: se calcula y loguea todo, sin escribir.
"""
