"""스모크 테스트 - 프로젝트 설정 검증."""


def test_project_imports():
    """audience_query 패키지가 정상적으로 임포트되는지 확인한다."""
    import audience_query

    assert audience_query.__version__ == "0.1.0"


def test_core_module_imports():
    """core 모듈이 정상적으로 임포트되는지 확인한다."""
    from audience_query import core

    assert core is not None


def test_engine_modules_import():
    """파서, 안전성, 미리보기 모듈이 임포트되는지 확인한다."""
    from audience_query import parser, preview, safety

    assert parser.extract is not None
    assert safety.analyze is not None
    assert preview.simulate is not None
