"""테스트용 요청 본문 생성 도우미"""


def notice(title="공지", **extra):
    return {"boardType": "NOTICE", "title": title, "content": "<p>내용</p>", **extra}


def attachment(name="결산서.pdf", **extra):
    return {"filenameOriginal": name, "fileUrl": f"/uploads/documents/{name}", "fileSize": 1024, **extra}
