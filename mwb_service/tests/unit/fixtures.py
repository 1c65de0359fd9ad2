"""Weekly page and tooltip payloads used across the engine tests."""

from typing import Any, Callable, Dict, List

import httpx

BASE_URL = "https://wol.jw.org"
PUB_PATH = "/wol/pc/r4/lp-s/202201/0"


def pub_href(n: int) -> str:
    return f"/es{PUB_PATH}/{n}"


PAGE_HTML = f"""
<html><body><div id="article">
<header>
  <h1 id="p1">WEEK 1: 2022-01-01 - 2022-01-07</h1>
  <h2 id="p2"><a href="/es/wol/bc/r4/lp-s/202201/0/0">ISAÍAS 58, 59</a></h2>
</header>
<div class="bodyTxt">
  <h3 id="p3" class="dc-icon--music"><a href="{pub_href(1)}">Canción 1</a> y oración | Palabras de introducción (1 min.)</h3>
  <div class="dc-icon--gem"><h2>TESOROS DE LA BIBLIA</h2></div>
  <div id="tt8">
    <h3>1. “Proclamen un año de buena voluntad”</h3>
    <div>
      <p class="du-color--textSubdued">(10 mins.)</p>
      <p>Jehová libera a los oprimidos (<a href="{pub_href(2)}">Is 58:6</a>).</p>
      <p>Su pueblo disfruta de paz (<a href="{pub_href(3)}">w14 15/1 12</a>; <a href="{pub_href(4)}">w20.07 5</a>).</p>
    </div>
  </div>
  <h3>2. Busquemos perlas escondidas</h3>
  <div>
    <p class="du-color--textSubdued">(10 mins.)</p>
    <p><a class="b" href="{pub_href(5)}">Is 57:15</a>. ¿Con quién habita Jehová? (<a href="{pub_href(6)}">w05 15/10 26</a>)</p>
    <ul><li class="du-margin-top--8"><p>¿Qué perlas espirituales ha encontrado?</p></li></ul>
  </div>
  <h3>3. Lectura de la Biblia</h3>
  <div>
    <p class="du-color--textSubdued">(4 mins.)</p>
    <p><a href="{pub_href(7)}">Is 58:1-14</a> (<a href="{pub_href(8)}">th lección 10</a>)</p>
  </div>
  <div class="dc-icon--wheat"><h2>SEAMOS MEJORES MAESTROS</h2></div>
  <h3>4. Empiece conversaciones</h3>
  <div><p class="du-color--textSubdued">(3 mins.) De casa en casa. Use la sugerencia. (<a href="{pub_href(9)}">lmd lección 1 punto 3</a>)</p></div>
  <h3>5. Discurso</h3>
  <div><p class="du-color--textSubdued">(5 min.) Discurso a cargo de un anciano.</p></div>
  <div class="dc-icon--sheep"><h2>NUESTRA VIDA CRISTIANA</h2></div>
  <h3 class="dc-icon--music"><a href="{pub_href(10)}">Canción 45</a></h3>
  <h3>6. Necesidades de la congregación</h3>
  <div><p class="du-color--textSubdued">(15 mins.)</p><p>Análisis con el auditorio.</p></div>
  <h3>7. Estudio bíblico de la congregación</h3>
  <div><p class="du-color--textSubdued">(30 mins.) <a href="/es/wol/d/r4/lp-s/1102023301">lff lección 1</a></p></div>
  <h3 class="dc-icon--music"><a href="{pub_href(11)}">Canción 100</a> y oración</h3>
</div>
</div></body></html>
"""


def item(content: str, article_classes: str, **extra: Any) -> Dict[str, Any]:
    return {"items": [{"content": content, "articleClasses": article_classes, **extra}]}


def song(title: str, theme: str, lyrics: str, closing: str) -> Dict[str, Any]:
    return item(
        f'<header><h1 id="p2">{title}</h1><p id="p3">({theme})</p></header>'
        f'<div class="bodyTxt"><p>{lyrics}</p></div>'
        f'<div class="closingContent"><p>({closing})</p></div>',
        "pub-sjj docClass-31",
    )


def scripture(text: str) -> Dict[str, Any]:
    return item(f'<p><span class="v"><a class="b" href="#">6</a> {text}</span></p>', "bibleCitation pub-nwtsty")


def talk(text: str) -> Dict[str, Any]:
    return item(f'<p class="sb"><span class="parNum">12</span> {text}</p>', "pub-w docClass-40")


def generic(text: str) -> Dict[str, Any]:
    return item(f"<div><p>{text}</p>\n\n<p>Segunda línea</p></div>", "pub-th docClass-1")


PAYLOADS: Dict[str, Dict[str, Any]] = {
    "/wol/bc/r4/lp-s/202201/0/0": item(
        "<p>Isaías 58, 59</p>",
        "bibleCitation pub-nwtsty",
        caption="Isaías 58:1–59:21",
        book=23,
        first_chapter=58,
        last_chapter=59,
        url="/wol/b/r4/lp-s/nwtsty/23/58",
    ),
    f"{PUB_PATH}/1": song("Jehová, mi Roca", "Salmo 62:6", "Letra de la canción 1", "Vea también Sal 18:2"),
    f"{PUB_PATH}/2": scripture("¿No es este el ayuno que yo quiero?"),
    f"{PUB_PATH}/3": talk("Jehová siempre cuida de su pueblo."),
    f"{PUB_PATH}/4": talk("La paz viene de Dios."),
    f"{PUB_PATH}/5": scripture("Habito con el quebrantado."),
    f"{PUB_PATH}/6": talk("Jehová está cerca de los humildes."),
    f"{PUB_PATH}/7": scripture("Clama a voz en cuello."),
    f"{PUB_PATH}/8": generic("Lea con exactitud"),
    f"{PUB_PATH}/9": generic("Sea natural"),
    f"{PUB_PATH}/10": song("Sigamos adelante", "Filipenses 3:16", "Letra de la canción 45", "Vea también Heb 6:1"),
    f"{PUB_PATH}/11": song("Hospitalidad", "Romanos 12:13", "Letra de la canción 100", "Vea también 1 Ped 4:9"),
}


def make_handler(payloads: Dict[str, Dict[str, Any]], requested: List[str]) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        payload = payloads.get(request.url.path)
        if payload is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, json=payload)

    return handler


