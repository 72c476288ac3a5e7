"""PHP block templating: `<?php ... ?>` echo, foreach and if blocks."""

from __future__ import annotations

from jsxtv.language import Language


_CLOSE_BLOCK = "<?php } ?>"

PHP = Language(
    name="php",
    aliases=("php-block",),
    description="PHP echo/foreach/if blocks reading from a $data array.",
    context_base="data",
    replace={
        "format": "<?php echo htmlspecialchars( $||%var||[ '||%1||' ], ENT_QUOTES ); ?>",
    },
    list={
        "open": "<?php foreach ( $||%var||[ '||%1||' ] as $||%subVar|| ) { ?>",
        "close": _CLOSE_BLOCK,
        "formatObjectProperty": "<?php echo htmlspecialchars( $||%subVar||[ '||%1||' ], ENT_QUOTES ); ?>",
        "formatPrimitive": "<?php echo htmlspecialchars( $||%subVar||, ENT_QUOTES ); ?>",
    },
    control={
        "ifTruthy": {"open": "<?php if ( $||%var||[ '||%1||' ] ) { ?>", "close": _CLOSE_BLOCK},
        "ifFalsy": {"open": "<?php if ( ! $||%var||[ '||%1||' ] ) { ?>", "close": _CLOSE_BLOCK},
        "ifEqual": {"open": "<?php if ( $||%var||[ '||%1||' ] === ||%2|| ) { ?>", "close": _CLOSE_BLOCK},
        "ifNotEqual": {"open": "<?php if ( $||%var||[ '||%1||' ] !== ||%2|| ) { ?>", "close": _CLOSE_BLOCK},
    },
)
